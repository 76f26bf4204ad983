"""Domain probe for todo use cases.

Following Domain-Oriented Observability patterns, this probe captures
authorization decisions and state changes of todos.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TodoServiceProbe(Protocol):
    """Domain probe for TodoService operations."""

    def todo_access_denied(self, todo_id: str, user_id: str, operation: str) -> None:
        """Record that a visible todo was refused to a non-owner."""
        ...

    def todo_created(self, todo_id: str, user_id: str, is_public: bool) -> None:
        """Record that a todo was created."""
        ...

    def todo_updated(self, todo_id: str, user_id: str) -> None:
        """Record that a todo was updated by its owner."""
        ...

    def todo_deleted(self, todo_id: str, user_id: str) -> None:
        """Record that a todo was deleted by its owner."""
        ...

    def todo_operation_failed(self, operation: str, error: str) -> None:
        """Record an infrastructure failure during a todo operation."""
        ...

    def with_context(self, context: ObservationContext) -> TodoServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTodoServiceProbe:
    """Default implementation of TodoServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTodoServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTodoServiceProbe(logger=self._logger, context=context)

    def todo_access_denied(self, todo_id: str, user_id: str, operation: str) -> None:
        """Record that a visible todo was refused to a non-owner."""
        self._logger.warning(
            "todo_access_denied",
            todo_id=todo_id,
            user_id=user_id,
            operation=operation,
            **self._get_context_kwargs(),
        )

    def todo_created(self, todo_id: str, user_id: str, is_public: bool) -> None:
        """Record that a todo was created."""
        self._logger.info(
            "todo_created",
            todo_id=todo_id,
            user_id=user_id,
            is_public=is_public,
            **self._get_context_kwargs(),
        )

    def todo_updated(self, todo_id: str, user_id: str) -> None:
        """Record that a todo was updated by its owner."""
        self._logger.info(
            "todo_updated",
            todo_id=todo_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def todo_deleted(self, todo_id: str, user_id: str) -> None:
        """Record that a todo was deleted by its owner."""
        self._logger.info(
            "todo_deleted",
            todo_id=todo_id,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def todo_operation_failed(self, operation: str, error: str) -> None:
        """Record an infrastructure failure during a todo operation."""
        self._logger.error(
            "todo_operation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
