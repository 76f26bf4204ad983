"""Request and response models for todo API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from todo.application.value_objects import Creator, TodoPage
from todo.domain.aggregates import Todo
from todo.domain.value_objects import TodoChanges


class CreateTodoRequest(BaseModel):
    """Request to create a todo owned by the caller.

    The owner and tenant always come from the access token.
    """

    title: str = Field(
        ...,
        max_length=255,
        description="Todo title",
        examples=["Write quarterly report"],
    )
    description: str = Field("", description="Free-form description")
    is_public: bool = Field(
        False, description="Whether other users of the tenant may read it"
    )
    due_date: datetime | None = Field(None, description="Optional due date")


class UpdateTodoRequest(BaseModel):
    """Partial update of a todo. Omitted fields are left unchanged."""

    title: str | None = Field(None, max_length=255, description="New title")
    description: str | None = Field(None, description="New description")
    completed: bool | None = Field(None, description="Completion state")
    is_public: bool | None = Field(None, description="Public visibility")
    due_date: datetime | None = Field(None, description="New due date")

    def to_changes(self) -> TodoChanges:
        """Convert to a domain partial update."""
        return TodoChanges(
            title=self.title,
            description=self.description,
            completed=self.completed,
            is_public=self.is_public,
            due_date=self.due_date,
        )


class CreatorResponse(BaseModel):
    """Display information about a todo's creator."""

    id: str = Field(..., description="User ID (ULID format)")
    name: str = Field(..., description="Display name")


class TodoResponse(BaseModel):
    """Response containing todo details."""

    id: str = Field(..., description="Todo ID (ULID format)")
    user_id: str = Field(..., description="Owner's user ID")
    title: str
    description: str
    completed: bool
    is_public: bool
    due_date: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    creator: CreatorResponse | None = Field(
        None, description="Creator info, present in public listings"
    )

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_domain(cls, todo: Todo, creator: Creator | None = None) -> TodoResponse:
        """Convert domain Todo aggregate to API response.

        Args:
            todo: Todo domain aggregate
            creator: Optional resolved creator

        Returns:
            TodoResponse with todo details
        """
        return cls(
            id=todo.id.value,
            user_id=todo.user_id.value,
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
            is_public=todo.is_public,
            due_date=todo.due_date,
            completed_at=todo.completed_at,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
            creator=CreatorResponse(id=creator.id, name=creator.name)
            if creator
            else None,
        )


class TodoListResponse(BaseModel):
    """One page of todos with the total count."""

    todos: list[TodoResponse]
    total: int = Field(..., description="Number of matching todos across all pages")
    limit: int = Field(..., description="Effective page size")
    offset: int = Field(..., description="Effective offset")

    @classmethod
    def from_page(cls, page: TodoPage) -> TodoListResponse:
        """Convert a TodoPage to API response."""
        return cls(
            todos=[
                TodoResponse.from_domain(todo, page.creators.get(todo.user_id.value))
                for todo in page.todos
            ],
            total=page.total,
            limit=page.page.limit,
            offset=page.page.offset,
        )
