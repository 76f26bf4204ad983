"""Domain-Oriented Observability for the Todo application layer."""

from todo.application.observability.todo_service_probe import (
    DefaultTodoServiceProbe,
    TodoServiceProbe,
)

__all__ = [
    "DefaultTodoServiceProbe",
    "TodoServiceProbe",
]
