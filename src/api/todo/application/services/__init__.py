"""Application services for the Todo bounded context."""

from todo.application.services.todo_service import TodoService

__all__ = ["TodoService"]
