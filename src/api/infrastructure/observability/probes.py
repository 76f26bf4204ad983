"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database connection observability.

    This probe captures domain-significant events related to database
    connections without exposing logging implementation details.
    """

    def engine_created(self, host: str, database: str, pool_size: int) -> None:
        """Record that a pooled async engine was created."""
        ...

    def connection_check_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that a connectivity check against the database failed."""
        ...

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, host: str, database: str, pool_size: int) -> None:
        """Record that a pooled async engine was created."""
        self._logger.info(
            "database_engine_created",
            host=host,
            database=database,
            pool_size=pool_size,
            **self._get_context_kwargs(),
        )

    def connection_check_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that a connectivity check against the database failed."""
        self._logger.error(
            "database_connection_check_failed",
            host=host,
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        self._logger.info(
            "connection_pool_closed",
            **self._get_context_kwargs(),
        )


class TenantScopeProbe(Protocol):
    """Domain probe for tenant-scoped transactions."""

    def tenant_bound(self, tenant_id: str) -> None:
        """Record that a tenant was bound to a new transaction."""
        ...

    def tenant_binding_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that binding the tenant failed and the transaction was aborted."""
        ...

    def tenant_missing(self) -> None:
        """Record that a tenant-scoped operation was refused for lack of a tenant."""
        ...

    def scope_rolled_back(self, tenant_id: str, error: BaseException) -> None:
        """Record that a tenant-scoped transaction was rolled back."""
        ...

    def with_context(self, context: ObservationContext) -> TenantScopeProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantScopeProbe:
    """Default implementation of TenantScopeProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantScopeProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantScopeProbe(logger=self._logger, context=context)

    def tenant_bound(self, tenant_id: str) -> None:
        """Record that a tenant was bound to a new transaction."""
        self._logger.debug(
            "tenant_scope_bound",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_binding_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that binding the tenant failed and the transaction was aborted."""
        self._logger.error(
            "tenant_scope_binding_failed",
            tenant_id=tenant_id,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def tenant_missing(self) -> None:
        """Record that a tenant-scoped operation was refused for lack of a tenant."""
        self._logger.error(
            "tenant_scope_missing_tenant",
            **self._get_context_kwargs(),
        )

    def scope_rolled_back(self, tenant_id: str, error: BaseException) -> None:
        """Record that a tenant-scoped transaction was rolled back."""
        self._logger.info(
            "tenant_scope_rolled_back",
            tenant_id=tenant_id,
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
