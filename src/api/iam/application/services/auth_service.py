"""Application service for credential use cases.

Registration and login resolve the tenant from its slug in the tenant
directory, then do all user work inside a transaction bound to that
tenant. Email verification locates the owning tenant of a token through a
narrow database function and binds it the same way. Refresh binds the tenant
carried by the refresh token.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthServiceProbe,
    DefaultAuthServiceProbe,
)
from iam.application.security import (
    generate_verification_token,
    hash_password,
    verify_password,
)
from iam.application.value_objects import AuthResult
from iam.domain.aggregates import Tenant, User
from iam.domain.value_objects import TenantId, TenantSlug, UserId
from iam.ports.exceptions import DuplicateTenantSlugError, DuplicateUserEmailError
from iam.ports.repositories import ITenantRepository, IUserRepository
from infrastructure.database import tenant_transaction
from shared_kernel.auth import InvalidTokenError, JWTService
from shared_kernel.exceptions import (
    BadRequestError,
    ConflictError,
    InternalError,
    UnauthorizedError,
)

INVALID_CREDENTIALS = "invalid credentials"
DEFAULT_VERIFICATION_TTL = timedelta(hours=24)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Normalize an email for storage and lookup."""
    return email.strip().lower()


class AuthService:
    """Application service for registration, login and token lifecycle."""

    def __init__(
        self,
        tenant_repository: ITenantRepository,
        user_repository: IUserRepository,
        session: AsyncSession,
        jwt_service: JWTService,
        probe: AuthServiceProbe | None = None,
        verification_ttl: timedelta = DEFAULT_VERIFICATION_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize AuthService with dependencies.

        Args:
            tenant_repository: Repository for the tenant directory
            user_repository: Repository for users of the bound tenant
            session: Database session used for every transaction
            jwt_service: Issues and validates token pairs
            probe: Optional domain probe for observability
            verification_ttl: Lifetime of email verification tokens
            clock: Source of the current time, overridable in tests
        """
        self._tenant_repository = tenant_repository
        self._user_repository = user_repository
        self._session = session
        self._jwt_service = jwt_service
        self._probe = probe or DefaultAuthServiceProbe()
        self._verification_ttl = verification_ttl
        self._clock = clock

    async def register(
        self,
        email: str,
        password: str,
        tenant_slug: str,
        name: str = "",
    ) -> AuthResult:
        """Register a new member, creating the tenant on first use of its slug.

        Args:
            email: User's email, unique within the tenant
            password: Plaintext password
            tenant_slug: Slug of the tenant to join or create
            name: Optional display name

        Returns:
            AuthResult with a fresh token pair and the created user

        Raises:
            BadRequestError: If required input is missing or malformed
            ConflictError: If the email is already registered in the tenant
            InternalError: If the datastore fails
        """
        email = normalize_email(email)
        if not email or not password or not tenant_slug:
            raise BadRequestError("email, password and tenant_slug are required")

        try:
            slug = TenantSlug.from_string(tenant_slug)
            password_hash = hash_password(password)
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        try:
            async with self._session.begin():
                tenant = await self._tenant_repository.get_by_slug(slug)

            tenant_created = tenant is None
            if tenant is None:
                tenant = Tenant.create(slug)

            async with tenant_transaction(self._session, tenant.id.value):
                if tenant_created:
                    await self._tenant_repository.save(tenant)

                if await self._user_repository.get_by_email(email) is not None:
                    raise ConflictError("email already exists")

                user = User.register(
                    tenant_id=tenant.id,
                    email=email,
                    password_hash=password_hash,
                    name=name.strip(),
                    verification_token=generate_verification_token(),
                    verification_ttl=self._verification_ttl,
                    now=self._clock(),
                )
                await self._user_repository.save(user)
        except ConflictError:
            self._probe.registration_rejected(slug.value, reason="email_exists")
            raise
        except DuplicateUserEmailError as e:
            self._probe.registration_rejected(slug.value, reason="email_exists")
            raise ConflictError("email already exists") from e
        except DuplicateTenantSlugError as e:
            # Another registration created the tenant concurrently
            self._probe.registration_rejected(slug.value, reason="tenant_slug_race")
            raise ConflictError("tenant was created concurrently, retry") from e
        except SQLAlchemyError as e:
            raise InternalError("failed to register user") from e

        self._probe.user_registered(
            user_id=user.id.value,
            tenant_id=tenant.id.value,
            tenant_created=tenant_created,
        )
        return self._issue(user)

    async def login(self, email: str, password: str, tenant_slug: str) -> AuthResult:
        """Authenticate a user of a tenant with email and password.

        Unknown tenants, unknown emails and wrong passwords are reported
        identically.

        Raises:
            BadRequestError: If required input is missing
            UnauthorizedError: If the credentials do not match
            InternalError: If the datastore fails
        """
        email = normalize_email(email)
        if not email or not password or not tenant_slug:
            raise BadRequestError("email, password and tenant_slug are required")

        try:
            slug = TenantSlug.from_string(tenant_slug)
        except ValueError as e:
            self._probe.login_failed(tenant_slug, reason="invalid_slug")
            raise UnauthorizedError(INVALID_CREDENTIALS) from e

        try:
            async with self._session.begin():
                tenant = await self._tenant_repository.get_by_slug(slug)

            if tenant is None:
                self._probe.login_failed(slug.value, reason="tenant_not_found")
                raise UnauthorizedError(INVALID_CREDENTIALS)

            async with tenant_transaction(self._session, tenant.id.value):
                user = await self._user_repository.get_by_email(email)
        except SQLAlchemyError as e:
            raise InternalError("failed to log in") from e

        if user is None:
            self._probe.login_failed(slug.value, reason="user_not_found")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            self._probe.login_failed(slug.value, reason="wrong_password")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        self._probe.login_succeeded(user.id.value, user.tenant_id.value)
        return self._issue(user)

    async def verify_email(self, token: str) -> User:
        """Confirm a user's email with their single-use verification token.

        Raises:
            BadRequestError: If the token is missing, unknown or expired
            InternalError: If the datastore fails
        """
        if not token:
            raise BadRequestError("token is required")

        try:
            async with self._session.begin():
                tenant_id = await self._user_repository.locate_verification_tenant(
                    token
                )

            if tenant_id is None:
                self._probe.email_verification_failed(reason="unknown_token")
                raise BadRequestError("invalid verification token")

            async with tenant_transaction(self._session, tenant_id.value):
                user = await self._user_repository.get_by_verification_token(token)
                if user is None:
                    self._probe.email_verification_failed(reason="unknown_token")
                    raise BadRequestError("invalid verification token")

                if user.verification_expired(self._clock()):
                    self._probe.email_verification_failed(reason="expired_token")
                    raise BadRequestError("verification token has expired")

                user.mark_email_verified()
                await self._user_repository.save(user)
        except SQLAlchemyError as e:
            raise InternalError("failed to update user") from e

        self._probe.email_verified(user.id.value, user.tenant_id.value)
        return user

    async def refresh(self, refresh_token: str) -> AuthResult:
        """Exchange a refresh token for a new token pair.

        The user is reloaded inside the tenant named by the token, so a user
        that was removed can no longer refresh.

        Raises:
            BadRequestError: If the token is missing
            UnauthorizedError: If the token is invalid or the user is gone
            InternalError: If the datastore fails
        """
        if not refresh_token:
            raise BadRequestError("refresh_token is required")

        try:
            claims = self._jwt_service.validate_refresh_token(refresh_token)
            user_id = UserId.from_string(claims.user_id)
            tenant_id = TenantId.from_string(claims.tenant_id)
        except (InvalidTokenError, ValueError) as e:
            self._probe.token_refresh_failed(reason="invalid_token")
            raise UnauthorizedError("invalid refresh token") from e

        try:
            async with tenant_transaction(self._session, tenant_id.value):
                user = await self._user_repository.get_by_id(user_id)
        except SQLAlchemyError as e:
            raise InternalError("failed to refresh token") from e

        if user is None:
            self._probe.token_refresh_failed(reason="user_not_found")
            raise UnauthorizedError("user not found")

        self._probe.tokens_refreshed(user.id.value, user.tenant_id.value)
        return self._issue(user)

    def _issue(self, user: User) -> AuthResult:
        tokens = self._jwt_service.issue_token_pair(
            user_id=user.id.value,
            tenant_id=user.tenant_id.value,
            email=user.email,
            role=user.role.value,
        )
        return AuthResult(tokens=tokens, user=user)
