"""In-memory repositories for todo service tests.

The fakes read the bound tenant the same way the PostgreSQL repositories
do, so they fail with TenantNotSetError when a service forgets to open a
tenant-scoped transaction, and they never return rows of another tenant.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import pytest

from iam.domain.aggregates import User
from iam.domain.value_objects import TenantId, UserId
from shared_kernel.middleware.tenant_context import require_tenant_id
from todo.domain.aggregates import Todo
from todo.domain.value_objects import TodoId
from todo.ports.exceptions import TodoNotFoundError

EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class InMemoryTodoRepository:
    """Tenant-filtering fake of ITodoRepository."""

    def __init__(self) -> None:
        self.rows: dict[str, Todo] = {}
        self._tick = 0

    def seed(self, todo: Todo) -> Todo:
        """Insert a todo without requiring a bound tenant."""
        self._stamp(todo)
        self.rows[todo.id.value] = todo
        return todo

    async def find_by_id(self, todo_id: TodoId) -> Todo | None:
        todo = self.rows.get(todo_id.value)
        if todo is None or todo.tenant_id.value != require_tenant_id():
            return None
        return todo

    async def find_by_user_id(
        self, user_id: UserId, limit: int, offset: int
    ) -> list[Todo]:
        mine = [t for t in self._visible() if t.user_id == user_id]
        return mine[offset : offset + limit]

    async def count_by_user_id(self, user_id: UserId) -> int:
        return len([t for t in self._visible() if t.user_id == user_id])

    async def find_public(self, limit: int, offset: int) -> list[Todo]:
        public = [t for t in self._visible() if t.is_public]
        return public[offset : offset + limit]

    async def count_public(self) -> int:
        return len([t for t in self._visible() if t.is_public])

    async def create(self, todo: Todo) -> None:
        if todo.tenant_id.value != require_tenant_id():
            raise AssertionError("row violates the tenant isolation policy")
        self.seed(todo)

    async def update(self, todo: Todo) -> None:
        if await self.find_by_id(todo.id) is None:
            raise TodoNotFoundError(todo.id.value)
        self.rows[todo.id.value] = todo

    async def delete(self, todo_id: TodoId) -> bool:
        if await self.find_by_id(todo_id) is None:
            return False
        del self.rows[todo_id.value]
        return True

    def _visible(self) -> list[Todo]:
        tenant_id = require_tenant_id()
        todos = [t for t in self.rows.values() if t.tenant_id.value == tenant_id]
        return sorted(todos, key=lambda t: (t.created_at, t.id.value), reverse=True)

    def _stamp(self, todo: Todo) -> None:
        if todo.created_at is None:
            self._tick += 1
            todo.created_at = EPOCH + timedelta(minutes=self._tick)
            todo.updated_at = todo.created_at


class InMemoryUserRepository:
    """Tenant-filtering fake of the user lookups used by TodoService."""

    def __init__(self) -> None:
        self.rows: dict[str, User] = {}

    def seed(self, tenant_id: TenantId, name: str) -> User:
        user = User(
            id=UserId.generate(),
            tenant_id=tenant_id,
            email=f"{name.lower()}@example.com",
            password_hash="hash",
            name=name,
        )
        self.rows[user.id.value] = user
        return user

    async def get_by_ids(self, user_ids: Sequence[UserId]) -> list[User]:
        tenant_id = require_tenant_id()
        return [
            self.rows[user_id.value]
            for user_id in user_ids
            if user_id.value in self.rows
            and self.rows[user_id.value].tenant_id.value == tenant_id
        ]


@pytest.fixture
def todo_repository() -> InMemoryTodoRepository:
    return InMemoryTodoRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()
