"""Ports (interfaces) for the Todo bounded context."""

from todo.ports.exceptions import TodoNotFoundError
from todo.ports.repositories import ITodoRepository

__all__ = ["ITodoRepository", "TodoNotFoundError"]
