"""Value objects for the Todo bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ulid import ULID


@dataclass(frozen=True)
class TodoId:
    """Identifier for a todo item."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TodoId:
        """Generate a new TodoId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TodoId:
        """Create TodoId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid TodoId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class TodoChanges:
    """Partial update of a todo.

    A field left as None is not changed, so a due date can be moved but
    not removed through an update.
    """

    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    is_public: bool | None = None
    due_date: datetime | None = None
