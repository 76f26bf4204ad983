"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to deriving the tenant context from a
validated access token.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved_from_token(
        self,
        tenant_id: str,
        user_id: str,
    ) -> None:
        """Record that tenant context was resolved from token claims."""
        ...

    def tenant_claim_invalid(
        self,
        user_id: str,
    ) -> None:
        """Record that a validated token carried a malformed tenant claim."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_resolved_from_token(
        self,
        tenant_id: str,
        user_id: str,
    ) -> None:
        """Record that tenant context was resolved from token claims."""
        self._logger.debug(
            "tenant_resolved_from_token",
            tenant_id=tenant_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def tenant_claim_invalid(
        self,
        user_id: str,
    ) -> None:
        """Record that a validated token carried a malformed tenant claim."""
        self._logger.warning(
            "tenant_claim_invalid",
            user_id=user_id,
            **self._get_context_kwargs(),
        )
