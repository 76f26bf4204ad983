"""SQLAlchemy ORM models for the Todo bounded context."""

from todo.infrastructure.models.todo import TodoModel

__all__ = ["TodoModel"]
