"""Domain probe for user profile operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for UserService operations."""

    def profile_not_found(self, user_id: str) -> None:
        """Record that the caller's own user row could not be found."""
        ...

    def profile_updated(self, user_id: str) -> None:
        """Record that a user updated their profile."""
        ...

    def profile_operation_failed(self, operation: str, user_id: str, error: str) -> None:
        """Record an infrastructure failure during a profile operation."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def profile_not_found(self, user_id: str) -> None:
        """Record that the caller's own user row could not be found."""
        self._logger.warning(
            "profile_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def profile_updated(self, user_id: str) -> None:
        """Record that a user updated their profile."""
        self._logger.info(
            "profile_updated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def profile_operation_failed(self, operation: str, user_id: str, error: str) -> None:
        """Record an infrastructure failure during a profile operation."""
        self._logger.error(
            "profile_operation_failed",
            operation=operation,
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )
