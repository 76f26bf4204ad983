"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_started(self, app_name: str, version: str) -> None:
        """Record that the application finished starting."""
        ...

    def application_stopped(self, app_name: str) -> None:
        """Record that the application shut down and released its resources."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_started(self, app_name: str, version: str) -> None:
        """Record that the application finished starting."""
        self._logger.info(
            "application_started",
            app_name=app_name,
            version=version,
            **self._get_context_kwargs(),
        )

    def application_stopped(self, app_name: str) -> None:
        """Record that the application shut down and released its resources."""
        self._logger.info(
            "application_stopped",
            app_name=app_name,
            **self._get_context_kwargs(),
        )
