"""Todo aggregate for the Todo bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from iam.domain.value_objects import TenantId, UserId
from todo.domain.value_objects import TodoChanges, TodoId

TITLE_MAX_LENGTH = 255


def _validated_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise ValueError("title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    return title


@dataclass
class Todo:
    """Todo aggregate owned by one user of one tenant.

    Business rules:
    - tenant_id and user_id never change after creation
    - Only the owner may modify or delete a todo
    - A todo is readable by its owner, and by everyone in the tenant when public
    - completed_at is set when the todo becomes completed and cleared when
      it is reopened
    """

    id: TodoId
    tenant_id: TenantId
    user_id: UserId
    title: str
    description: str = ""
    completed: bool = False
    is_public: bool = False
    due_date: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        user_id: UserId,
        title: str,
        description: str = "",
        is_public: bool = False,
        due_date: datetime | None = None,
    ) -> Todo:
        """Factory method for creating a new, open todo.

        Args:
            tenant_id: Tenant of the creating user
            user_id: The creating user, who becomes the owner
            title: Non-blank title
            description: Optional free text
            is_public: Whether other users of the tenant may read it
            due_date: Optional due date

        Returns:
            A new Todo aggregate

        Raises:
            ValueError: If the title is blank or too long
        """
        return cls(
            id=TodoId.generate(),
            tenant_id=tenant_id,
            user_id=user_id,
            title=_validated_title(title),
            description=description,
            is_public=is_public,
            due_date=due_date,
        )

    def is_owned_by(self, user_id: UserId) -> bool:
        """Check whether the user owns this todo."""
        return self.user_id == user_id

    def is_visible_to(self, user_id: UserId) -> bool:
        """Check whether the user may read this todo."""
        return self.is_owned_by(user_id) or self.is_public

    def apply_changes(self, changes: TodoChanges, now: datetime) -> None:
        """Apply a partial update.

        Args:
            changes: Fields to change; None means unchanged
            now: Current time, recorded as completed_at on completion

        Raises:
            ValueError: If a provided title is blank or too long
        """
        if changes.title is not None:
            self.title = _validated_title(changes.title)
        if changes.description is not None:
            self.description = changes.description
        if changes.completed is not None:
            if changes.completed and not self.completed:
                self.completed_at = now
            elif not changes.completed:
                self.completed_at = None
            self.completed = changes.completed
        if changes.is_public is not None:
            self.is_public = changes.is_public
        if changes.due_date is not None:
            self.due_date = changes.due_date

    def __eq__(self, other: object) -> bool:
        """Todos are equal if they have the same ID."""
        if not isinstance(other, Todo):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
