"""PostgreSQL implementation of ITodoRepository.

The todos table is protected by the tenant isolation row policy. Every
query here additionally filters on the tenant bound to the current
transaction, so a misconfigured policy would still not leak rows.
"""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.value_objects import TenantId, UserId
from shared_kernel.middleware.tenant_context import require_tenant_id
from todo.domain.aggregates import Todo
from todo.domain.value_objects import TodoId
from todo.infrastructure.models import TodoModel
from todo.infrastructure.observability import (
    DefaultTodoRepositoryProbe,
    TodoRepositoryProbe,
)
from todo.ports.exceptions import TodoNotFoundError
from todo.ports.repositories import ITodoRepository

_NEWEST_FIRST = (TodoModel.created_at.desc(), TodoModel.id.desc())


class TodoRepository(ITodoRepository):
    """PostgreSQL-backed repository for Todo aggregates."""

    def __init__(
        self, session: AsyncSession, probe: TodoRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTodoRepositoryProbe()

    async def find_by_id(self, todo_id: TodoId) -> Todo | None:
        """Retrieve a todo of the bound tenant by ID."""
        model = await self._get_model(todo_id.value)
        if model is None:
            self._probe.todo_not_found(todo_id.value)
            return None
        return self._to_domain(model)

    async def find_by_user_id(
        self, user_id: UserId, limit: int, offset: int
    ) -> list[Todo]:
        """List one page of a user's todos, newest first."""
        stmt = (
            select(TodoModel)
            .where(
                TodoModel.tenant_id == require_tenant_id(),
                TodoModel.user_id == user_id.value,
            )
            .order_by(*_NEWEST_FIRST)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        todos = [self._to_domain(model) for model in result.scalars().all()]
        self._probe.todos_listed("user", len(todos))
        return todos

    async def count_by_user_id(self, user_id: UserId) -> int:
        """Count a user's todos."""
        stmt = select(func.count(TodoModel.id)).where(
            TodoModel.tenant_id == require_tenant_id(),
            TodoModel.user_id == user_id.value,
        )
        return int(await self._session.scalar(stmt) or 0)

    async def find_public(self, limit: int, offset: int) -> list[Todo]:
        """List one page of the tenant's public todos, newest first."""
        stmt = (
            select(TodoModel)
            .where(
                TodoModel.tenant_id == require_tenant_id(),
                TodoModel.is_public.is_(True),
            )
            .order_by(*_NEWEST_FIRST)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        todos = [self._to_domain(model) for model in result.scalars().all()]
        self._probe.todos_listed("public", len(todos))
        return todos

    async def count_public(self) -> int:
        """Count the tenant's public todos."""
        stmt = select(func.count(TodoModel.id)).where(
            TodoModel.tenant_id == require_tenant_id(),
            TodoModel.is_public.is_(True),
        )
        return int(await self._session.scalar(stmt) or 0)

    async def create(self, todo: Todo) -> None:
        """Insert a new todo.

        The tenant comes from the aggregate, not from the bound tenant, so
        that the row policy's WITH CHECK is what rejects a mismatch.
        """
        model = TodoModel(
            id=todo.id.value,
            tenant_id=todo.tenant_id.value,
            user_id=todo.user_id.value,
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
            is_public=todo.is_public,
            due_date=todo.due_date,
            completed_at=todo.completed_at,
        )
        self._session.add(model)
        await self._session.flush()

        todo.created_at = model.created_at
        todo.updated_at = model.updated_at
        self._probe.todo_created(todo.id.value, todo.tenant_id.value)

    async def update(self, todo: Todo) -> None:
        """Persist changes to an existing todo of the bound tenant.

        Raises:
            TodoNotFoundError: If the todo is not visible in the bound tenant
        """
        model = await self._get_model(todo.id.value)
        if model is None:
            self._probe.todo_not_found(todo.id.value)
            raise TodoNotFoundError(f"Todo {todo.id.value} not found")

        model.title = todo.title
        model.description = todo.description
        model.completed = todo.completed
        model.is_public = todo.is_public
        model.due_date = todo.due_date
        model.completed_at = todo.completed_at
        await self._session.flush()

        todo.updated_at = model.updated_at
        self._probe.todo_updated(todo.id.value)

    async def delete(self, todo_id: TodoId) -> bool:
        """Delete a todo of the bound tenant."""
        stmt = delete(TodoModel).where(
            TodoModel.tenant_id == require_tenant_id(),
            TodoModel.id == todo_id.value,
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            self._probe.todo_not_found(todo_id.value)
            return False

        self._probe.todo_deleted(todo_id.value)
        return True

    async def _get_model(self, todo_id: str) -> TodoModel | None:
        stmt = select(TodoModel).where(
            TodoModel.tenant_id == require_tenant_id(),
            TodoModel.id == todo_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: TodoModel) -> Todo:
        return Todo(
            id=TodoId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            user_id=UserId(value=model.user_id),
            title=model.title,
            description=model.description,
            completed=model.completed,
            is_public=model.is_public,
            due_date=model.due_date,
            completed_at=model.completed_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
