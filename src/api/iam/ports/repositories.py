"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. User operations run inside a tenant-scoped transaction and
only ever see rows of the bound tenant.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Tenant, User
from iam.domain.value_objects import TenantId, TenantSlug, UserId


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence.

    Tenants form a directory that is readable before any tenant is bound,
    since login and registration resolve the tenant from its slug.
    """

    async def save(self, tenant: Tenant) -> None:
        """Persist a tenant aggregate.

        Args:
            tenant: The Tenant aggregate to persist

        Raises:
            DuplicateTenantSlugError: If the slug is already taken
        """
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by its ID.

        Returns:
            The Tenant aggregate, or None if not found
        """
        ...

    async def get_by_slug(self, slug: TenantSlug) -> Tenant | None:
        """Retrieve a tenant by its slug.

        Returns:
            The Tenant aggregate, or None if not found
        """
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence.

    All methods except locate_verification_tenant assume a tenant-scoped
    transaction is active. Lookups of users that belong to another tenant
    return None, exactly like lookups of users that do not exist.
    """

    async def save(self, user: User) -> None:
        """Insert a new user or update an existing one.

        Raises:
            DuplicateUserEmailError: If the email is taken within the tenant
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user of the bound tenant by ID."""
        ...

    async def get_by_ids(self, user_ids: Sequence[UserId]) -> list[User]:
        """Retrieve the users of the bound tenant among the given IDs.

        IDs that do not resolve are skipped.
        """
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user of the bound tenant by email."""
        ...

    async def get_by_verification_token(self, token: str) -> User | None:
        """Retrieve the user of the bound tenant holding a verification token."""
        ...

    async def locate_verification_tenant(self, token: str) -> TenantId | None:
        """Find which tenant a verification token belongs to.

        This is the only user lookup that runs without a bound tenant. It
        reveals the tenant ID and nothing else about the user.

        Returns:
            The owning tenant ID, or None if no user holds the token
        """
        ...
