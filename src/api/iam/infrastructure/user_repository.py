"""PostgreSQL implementation of IUserRepository.

The users table is protected by the tenant isolation row policy. Every
query here additionally filters on the tenant bound to the current
transaction, so a misconfigured policy would still not leak rows.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import TenantId, UserId, UserRole
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.exceptions import DuplicateUserEmailError
from iam.ports.repositories import IUserRepository
from shared_kernel.middleware.tenant_context import require_tenant_id


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def save(self, user: User) -> None:
        """Persist a user aggregate.

        Creates a new user or updates an existing one. The row policy
        rejects the insert if the user's tenant is not the bound tenant.

        Raises:
            DuplicateUserEmailError: If the email already exists in the tenant
        """
        try:
            model = await self._get_model(user.id.value)

            if model:
                model.email = user.email
                model.password_hash = user.password_hash
                model.name = user.name
                model.role = user.role.value
                model.email_verified = user.email_verified
                model.verification_token = user.verification_token
                model.verification_token_expires_at = (
                    user.verification_token_expires_at
                )
            else:
                model = UserModel(
                    id=user.id.value,
                    tenant_id=user.tenant_id.value,
                    email=user.email,
                    password_hash=user.password_hash,
                    name=user.name,
                    role=user.role.value,
                    email_verified=user.email_verified,
                    verification_token=user.verification_token,
                    verification_token_expires_at=user.verification_token_expires_at,
                )
                self._session.add(model)

            await self._session.flush()

        except IntegrityError as e:
            if "uq_users_tenant_id_email" in str(e):
                self._probe.duplicate_user_email(user.tenant_id.value)
                raise DuplicateUserEmailError(
                    "Email is already registered in this tenant"
                ) from e
            raise

        user.created_at = model.created_at
        user.updated_at = model.updated_at
        self._probe.user_saved(user.id.value, user.tenant_id.value)

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user of the bound tenant by ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found in this tenant
        """
        model = await self._get_model(user_id.value)

        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_ids(self, user_ids: Sequence[UserId]) -> list[User]:
        """Retrieve the users of the bound tenant among the given IDs."""
        if not user_ids:
            return []

        stmt = select(UserModel).where(
            UserModel.tenant_id == require_tenant_id(),
            UserModel.id.in_([user_id.value for user_id in user_ids]),
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user of the bound tenant by email.

        Args:
            email: Normalized email address

        Returns:
            The User aggregate, or None if not found in this tenant
        """
        stmt = select(UserModel).where(
            UserModel.tenant_id == require_tenant_id(),
            UserModel.email == email,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found("email")
            return None

        self._probe.user_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_verification_token(self, token: str) -> User | None:
        """Retrieve the user of the bound tenant holding a verification token."""
        stmt = select(UserModel).where(
            UserModel.tenant_id == require_tenant_id(),
            UserModel.verification_token == token,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found("verification_token")
            return None

        return self._to_domain(model)

    async def locate_verification_tenant(self, token: str) -> TenantId | None:
        """Find which tenant a verification token belongs to.

        Calls the SECURITY DEFINER function installed by the row policy
        migration, which is the only way the application role can look
        across tenants. It returns the tenant ID and nothing else.
        """
        stmt = select(func.app_find_verification_tenant(token))
        tenant_id = await self._session.scalar(stmt)
        self._probe.verification_tenant_lookup(found=tenant_id is not None)

        if tenant_id is None:
            return None

        return TenantId(value=tenant_id)

    async def _get_model(self, user_id: str) -> UserModel | None:
        stmt = select(UserModel).where(
            UserModel.tenant_id == require_tenant_id(),
            UserModel.id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            email=model.email,
            password_hash=model.password_hash,
            name=model.name,
            role=UserRole(model.role),
            email_verified=model.email_verified,
            verification_token=model.verification_token,
            verification_token_expires_at=model.verification_token_expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
