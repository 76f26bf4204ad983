"""Dependency injection for the Todo bounded context.

Composes the request session with todo-specific components (repositories,
service). The caller's tenant is bound by the authentication dependencies,
not here.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.user import get_user_repository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_session
from todo.application.observability import (
    DefaultTodoServiceProbe,
    TodoServiceProbe,
)
from todo.application.services import TodoService
from todo.infrastructure.todo_repository import TodoRepository


def get_todo_service_probe() -> TodoServiceProbe:
    """Get TodoServiceProbe instance."""
    return DefaultTodoServiceProbe()


def get_todo_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TodoRepository:
    """Get TodoRepository instance.

    Args:
        session: Async database session

    Returns:
        TodoRepository instance
    """
    return TodoRepository(session=session)


def get_todo_service(
    todo_repo: Annotated[TodoRepository, Depends(get_todo_repository)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
    probe: Annotated[TodoServiceProbe, Depends(get_todo_service_probe)],
) -> TodoService:
    """Get TodoService instance.

    Args:
        todo_repo: Todo repository (shares session via FastAPI dependency caching)
        user_repo: User repository for resolving creators
        session: Database session for transaction management
        probe: Todo service probe for observability

    Returns:
        TodoService instance
    """
    return TodoService(
        todo_repository=todo_repo,
        user_repository=user_repo,
        session=session,
        probe=probe,
    )
