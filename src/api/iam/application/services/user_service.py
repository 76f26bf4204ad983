"""Application service for the caller's own profile."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from iam.application.value_objects import CurrentUser
from iam.domain.aggregates import User
from iam.ports.repositories import IUserRepository
from infrastructure.database import tenant_transaction
from shared_kernel.exceptions import BadRequestError, InternalError, NotFoundError


class UserService:
    """Application service for profile reads and updates.

    The user is always identified by the authenticated session, never by
    caller input, and every read runs in the caller's tenant.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for users of the bound tenant
            session: Database session used for the tenant transaction
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._session = session
        self._probe = probe or DefaultUserServiceProbe()

    async def get_me(self, current_user: CurrentUser) -> User:
        """Return the authenticated user's profile.

        Raises:
            NotFoundError: If the user no longer exists
            InternalError: If the datastore fails
        """
        try:
            async with tenant_transaction(
                self._session, current_user.tenant_id.value
            ):
                user = await self._user_repository.get_by_id(current_user.user_id)
        except SQLAlchemyError as e:
            self._probe.profile_operation_failed(
                "get_me", current_user.user_id.value, str(e)
            )
            raise InternalError("failed to get user") from e

        if user is None:
            self._probe.profile_not_found(current_user.user_id.value)
            raise NotFoundError("user not found")
        return user

    async def update_me(self, current_user: CurrentUser, name: str | None) -> User:
        """Update the authenticated user's profile.

        Only fields that are provided change.

        Raises:
            BadRequestError: If a provided name is blank
            NotFoundError: If the user no longer exists
            InternalError: If the datastore fails
        """
        if name is not None and not name.strip():
            raise BadRequestError("name must not be empty")

        try:
            async with tenant_transaction(
                self._session, current_user.tenant_id.value
            ):
                user = await self._user_repository.get_by_id(current_user.user_id)
                if user is None:
                    self._probe.profile_not_found(current_user.user_id.value)
                    raise NotFoundError("user not found")

                if name is not None:
                    user.rename(name.strip())
                await self._user_repository.save(user)
        except SQLAlchemyError as e:
            self._probe.profile_operation_failed(
                "update_me", current_user.user_id.value, str(e)
            )
            raise InternalError("failed to update user") from e

        self._probe.profile_updated(user.id.value)
        return user
