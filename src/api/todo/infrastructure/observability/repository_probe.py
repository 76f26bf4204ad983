"""Domain probe for todo repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TodoRepositoryProbe(Protocol):
    """Domain probe for todo repository operations."""

    def todo_created(self, todo_id: str, tenant_id: str) -> None:
        """Record that a todo row was inserted."""
        ...

    def todo_updated(self, todo_id: str) -> None:
        """Record that a todo row was updated."""
        ...

    def todo_deleted(self, todo_id: str) -> None:
        """Record that a todo row was deleted."""
        ...

    def todo_not_found(self, todo_id: str) -> None:
        """Record that a todo lookup found nothing in the bound tenant."""
        ...

    def todos_listed(self, scope: str, count: int) -> None:
        """Record that a page of todos was listed."""
        ...

    def with_context(self, context: ObservationContext) -> TodoRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTodoRepositoryProbe:
    """Default implementation of TodoRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTodoRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTodoRepositoryProbe(logger=self._logger, context=context)

    def todo_created(self, todo_id: str, tenant_id: str) -> None:
        self._logger.info(
            "todo_created",
            todo_id=todo_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def todo_updated(self, todo_id: str) -> None:
        self._logger.info(
            "todo_updated",
            todo_id=todo_id,
            **self._get_context_kwargs(),
        )

    def todo_deleted(self, todo_id: str) -> None:
        self._logger.info(
            "todo_deleted",
            todo_id=todo_id,
            **self._get_context_kwargs(),
        )

    def todo_not_found(self, todo_id: str) -> None:
        self._logger.debug(
            "todo_not_found",
            todo_id=todo_id,
            **self._get_context_kwargs(),
        )

    def todos_listed(self, scope: str, count: int) -> None:
        self._logger.debug(
            "todos_listed",
            scope=scope,
            count=count,
            **self._get_context_kwargs(),
        )
