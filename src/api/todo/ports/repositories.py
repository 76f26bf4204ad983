"""Repository protocol (port) for the Todo bounded context.

Every method assumes a tenant-scoped transaction is active and only ever
sees todos of the bound tenant. A todo of another tenant is reported
exactly like a todo that does not exist.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.value_objects import UserId
from todo.domain.aggregates import Todo
from todo.domain.value_objects import TodoId


@runtime_checkable
class ITodoRepository(Protocol):
    """Repository for Todo aggregate persistence.

    Listings are ordered newest first (created_at, then id, descending).
    """

    async def find_by_id(self, todo_id: TodoId) -> Todo | None:
        """Retrieve a todo of the bound tenant by ID.

        Returns:
            The Todo aggregate, or None if absent or in another tenant
        """
        ...

    async def find_by_user_id(
        self, user_id: UserId, limit: int, offset: int
    ) -> list[Todo]:
        """List one page of a user's todos."""
        ...

    async def count_by_user_id(self, user_id: UserId) -> int:
        """Count a user's todos."""
        ...

    async def find_public(self, limit: int, offset: int) -> list[Todo]:
        """List one page of the tenant's public todos."""
        ...

    async def count_public(self) -> int:
        """Count the tenant's public todos."""
        ...

    async def create(self, todo: Todo) -> None:
        """Insert a new todo.

        The row policy rejects the insert if the todo's tenant is not the
        bound tenant.
        """
        ...

    async def update(self, todo: Todo) -> None:
        """Persist changes to an existing todo of the bound tenant.

        Raises:
            TodoNotFoundError: If the todo is not visible in the bound tenant
        """
        ...

    async def delete(self, todo_id: TodoId) -> bool:
        """Delete a todo of the bound tenant.

        Returns:
            True if a row was deleted, False if none matched
        """
        ...
