"""Application service for todo use cases.

Applies the todo authorization rules on top of tenant isolation:

- Reading a todo is allowed to its owner, and to anyone in the tenant when
  the todo is public.
- Updating and deleting are allowed to the owner only.
- A todo in another tenant is never found, which is indistinguishable from
  a todo that does not exist.

Every operation runs in one transaction bound to the caller's tenant.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.value_objects import CurrentUser
from iam.domain.value_objects import UserId
from iam.ports.repositories import IUserRepository
from infrastructure.database import tenant_transaction
from shared_kernel.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)
from todo.application.observability import (
    DefaultTodoServiceProbe,
    TodoServiceProbe,
)
from todo.application.value_objects import Creator, PageRequest, TodoPage
from todo.domain.aggregates import Todo
from todo.domain.value_objects import TodoChanges, TodoId
from todo.ports.exceptions import TodoNotFoundError
from todo.ports.repositories import ITodoRepository

TODO_NOT_FOUND = "todo not found"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TodoService:
    """Application service for todo management."""

    def __init__(
        self,
        todo_repository: ITodoRepository,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: TodoServiceProbe | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize TodoService with dependencies.

        Args:
            todo_repository: Repository for todos of the bound tenant
            user_repository: Repository used to resolve todo creators
            session: Database session used for the tenant transaction
            probe: Optional domain probe for observability
            clock: Source of the current time, overridable in tests
        """
        self._todo_repository = todo_repository
        self._user_repository = user_repository
        self._session = session
        self._probe = probe or DefaultTodoServiceProbe()
        self._clock = clock

    async def list_my_todos(
        self, actor: CurrentUser, limit: int = 0, offset: int = 0
    ) -> TodoPage:
        """List the caller's own todos, newest first.

        Raises:
            InternalError: If the datastore fails
        """
        page = PageRequest.of(limit, offset)
        try:
            async with tenant_transaction(self._session, actor.tenant_id.value):
                todos = await self._todo_repository.find_by_user_id(
                    actor.user_id, page.limit, page.offset
                )
                total = await self._todo_repository.count_by_user_id(actor.user_id)
        except SQLAlchemyError as e:
            self._probe.todo_operation_failed("list_my_todos", str(e))
            raise InternalError("failed to get todos") from e

        return TodoPage(todos=todos, total=total, page=page)

    async def list_public_todos(
        self, actor: CurrentUser, limit: int = 0, offset: int = 0
    ) -> TodoPage:
        """List the public todos of the caller's tenant with their creators.

        Raises:
            InternalError: If the datastore fails
        """
        page = PageRequest.of(limit, offset)
        try:
            async with tenant_transaction(self._session, actor.tenant_id.value):
                todos = await self._todo_repository.find_public(
                    page.limit, page.offset
                )
                total = await self._todo_repository.count_public()

                creator_ids = list(dict.fromkeys(todo.user_id for todo in todos))
                users = await self._user_repository.get_by_ids(creator_ids)
        except SQLAlchemyError as e:
            self._probe.todo_operation_failed("list_public_todos", str(e))
            raise InternalError("failed to get public todos") from e

        creators = {
            user.id.value: Creator(id=user.id.value, name=user.name) for user in users
        }
        return TodoPage(todos=todos, total=total, page=page, creators=creators)

    async def get_todo(self, actor: CurrentUser, todo_id: TodoId) -> Todo:
        """Get a todo the caller owns, or a public todo of the caller's tenant.

        Raises:
            NotFoundError: If the todo does not exist in the caller's tenant
            ForbiddenError: If the todo is private to another user
            InternalError: If the datastore fails
        """
        try:
            async with tenant_transaction(self._session, actor.tenant_id.value):
                todo = await self._todo_repository.find_by_id(todo_id)
        except SQLAlchemyError as e:
            self._probe.todo_operation_failed("get_todo", str(e))
            raise InternalError("failed to get todo") from e

        if todo is None:
            raise NotFoundError(TODO_NOT_FOUND)

        if not todo.is_visible_to(actor.user_id):
            self._probe.todo_access_denied(todo_id.value, actor.user_id.value, "get")
            raise ForbiddenError("not allowed to access this todo")

        return todo

    async def create_todo(
        self,
        actor: CurrentUser,
        title: str,
        description: str = "",
        is_public: bool = False,
        due_date: datetime | None = None,
    ) -> Todo:
        """Create a todo owned by the caller in the caller's tenant.

        Raises:
            BadRequestError: If the title is blank or too long
            InternalError: If the datastore fails
        """
        try:
            todo = Todo.create(
                tenant_id=actor.tenant_id,
                user_id=actor.user_id,
                title=title,
                description=description,
                is_public=is_public,
                due_date=due_date,
            )
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        try:
            async with tenant_transaction(self._session, actor.tenant_id.value):
                await self._todo_repository.create(todo)
        except SQLAlchemyError as e:
            self._probe.todo_operation_failed("create_todo", str(e))
            raise InternalError("failed to create todo") from e

        self._probe.todo_created(todo.id.value, actor.user_id.value, todo.is_public)
        return todo

    async def update_todo(
        self, actor: CurrentUser, todo_id: TodoId, changes: TodoChanges
    ) -> Todo:
        """Apply a partial update to a todo the caller owns.

        Raises:
            NotFoundError: If the todo does not exist in the caller's tenant
            ForbiddenError: If the caller does not own the todo
            BadRequestError: If a provided title is blank or too long
            InternalError: If the datastore fails
        """
        try:
            async with tenant_transaction(self._session, actor.tenant_id.value):
                todo = await self._owned_todo(actor.user_id, todo_id, "update")
                try:
                    todo.apply_changes(changes, now=self._clock())
                except ValueError as e:
                    raise BadRequestError(str(e)) from e
                await self._todo_repository.update(todo)
        except TodoNotFoundError as e:
            raise NotFoundError(TODO_NOT_FOUND) from e
        except SQLAlchemyError as e:
            self._probe.todo_operation_failed("update_todo", str(e))
            raise InternalError("failed to update todo") from e

        self._probe.todo_updated(todo_id.value, actor.user_id.value)
        return todo

    async def delete_todo(self, actor: CurrentUser, todo_id: TodoId) -> None:
        """Delete a todo the caller owns.

        Raises:
            NotFoundError: If the todo does not exist in the caller's tenant
            ForbiddenError: If the caller does not own the todo
            InternalError: If the datastore fails
        """
        try:
            async with tenant_transaction(self._session, actor.tenant_id.value):
                await self._owned_todo(actor.user_id, todo_id, "delete")
                if not await self._todo_repository.delete(todo_id):
                    raise NotFoundError(TODO_NOT_FOUND)
        except SQLAlchemyError as e:
            self._probe.todo_operation_failed("delete_todo", str(e))
            raise InternalError("failed to delete todo") from e

        self._probe.todo_deleted(todo_id.value, actor.user_id.value)

    async def _owned_todo(
        self, user_id: UserId, todo_id: TodoId, operation: str
    ) -> Todo:
        todo = await self._todo_repository.find_by_id(todo_id)
        if todo is None:
            raise NotFoundError(TODO_NOT_FOUND)

        if not todo.is_owned_by(user_id):
            self._probe.todo_access_denied(todo_id.value, user_id.value, operation)
            raise ForbiddenError(f"not allowed to {operation} this todo")

        return todo
