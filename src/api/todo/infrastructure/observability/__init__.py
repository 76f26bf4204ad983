"""Domain-Oriented Observability for the Todo infrastructure layer."""

from todo.infrastructure.observability.repository_probe import (
    DefaultTodoRepositoryProbe,
    TodoRepositoryProbe,
)

__all__ = [
    "DefaultTodoRepositoryProbe",
    "TodoRepositoryProbe",
]
