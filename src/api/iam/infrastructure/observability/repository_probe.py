"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to tenant and user repository operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantRepositoryProbe(Protocol):
    """Domain probe for tenant repository operations."""

    def tenant_saved(self, tenant_id: str, slug: str) -> None:
        """Record that a tenant was successfully saved."""
        ...

    def tenant_not_found(self, lookup: str) -> None:
        """Record that a tenant lookup found nothing."""
        ...

    def duplicate_tenant_slug(self, slug: str) -> None:
        """Record that a duplicate tenant slug was detected."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations.

    Records domain events during user persistence operations.
    """

    def user_saved(self, user_id: str, tenant_id: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, lookup: str) -> None:
        """Record that a user lookup found nothing in the bound tenant."""
        ...

    def duplicate_user_email(self, tenant_id: str) -> None:
        """Record that an email was already registered in the tenant."""
        ...

    def verification_tenant_lookup(self, found: bool) -> None:
        """Record a cross-tenant lookup of a verification token's tenant."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRepositoryProbe:
    """Default implementation of TenantRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRepositoryProbe(logger=self._logger, context=context)

    def tenant_saved(self, tenant_id: str, slug: str) -> None:
        """Record that a tenant was successfully saved."""
        self._logger.info(
            "tenant_saved",
            tenant_id=tenant_id,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, lookup: str) -> None:
        """Record that a tenant lookup found nothing."""
        self._logger.debug(
            "tenant_not_found",
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant_slug(self, slug: str) -> None:
        """Record that a duplicate tenant slug was detected."""
        self._logger.warning(
            "duplicate_tenant_slug",
            slug=slug,
            **self._get_context_kwargs(),
        )


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, user_id: str, tenant_id: str) -> None:
        """Record that a user was successfully saved."""
        self._logger.info(
            "user_saved",
            user_id=user_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, lookup: str) -> None:
        """Record that a user lookup found nothing in the bound tenant."""
        self._logger.debug(
            "user_not_found",
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def duplicate_user_email(self, tenant_id: str) -> None:
        """Record that an email was already registered in the tenant."""
        self._logger.warning(
            "duplicate_user_email",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def verification_tenant_lookup(self, found: bool) -> None:
        """Record a cross-tenant lookup of a verification token's tenant.

        This is the only read not confined to a bound tenant.
        """
        self._logger.info(
            "verification_tenant_lookup",
            found=found,
            **self._get_context_kwargs(),
        )
