"""Unit tests for the Todo aggregate."""

from datetime import datetime, timedelta, timezone

import pytest

from iam.domain.value_objects import TenantId, UserId
from todo.domain.aggregates import Todo
from todo.domain.aggregates.todo import TITLE_MAX_LENGTH
from todo.domain.value_objects import TodoChanges, TodoId

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def owner() -> UserId:
    return UserId.generate()


@pytest.fixture
def todo(owner) -> Todo:
    return Todo.create(
        tenant_id=TenantId.generate(),
        user_id=owner,
        title="Write report",
    )


class TestTodoCreate:
    """Tests for creating todos."""

    def test_new_todo_is_open_and_private(self, todo):
        """Todos start incomplete and private."""
        assert todo.completed is False
        assert todo.completed_at is None
        assert todo.is_public is False
        assert todo.description == ""

    def test_title_is_trimmed(self, owner):
        """Surrounding whitespace is removed from titles."""
        todo = Todo.create(TenantId.generate(), owner, "  Buy milk  ")

        assert todo.title == "Buy milk"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_is_rejected(self, owner, title):
        """A todo needs a title."""
        with pytest.raises(ValueError, match="title is required"):
            Todo.create(TenantId.generate(), owner, title)

    def test_overlong_title_is_rejected(self, owner):
        """Titles are limited to 255 characters."""
        with pytest.raises(ValueError, match="at most"):
            Todo.create(TenantId.generate(), owner, "x" * (TITLE_MAX_LENGTH + 1))


class TestTodoVisibility:
    """Tests for ownership and visibility rules."""

    def test_owner_can_see_private_todo(self, todo, owner):
        assert todo.is_owned_by(owner)
        assert todo.is_visible_to(owner)

    def test_other_user_cannot_see_private_todo(self, todo):
        other = UserId.generate()

        assert not todo.is_owned_by(other)
        assert not todo.is_visible_to(other)

    def test_other_user_can_see_public_todo(self, todo):
        """Public todos are readable by anyone in the tenant, but not owned."""
        other = UserId.generate()
        todo.is_public = True

        assert todo.is_visible_to(other)
        assert not todo.is_owned_by(other)


class TestTodoApplyChanges:
    """Tests for partial updates."""

    def test_empty_changes_leave_todo_untouched(self, todo):
        """Fields left as None are not changed."""
        before = (todo.title, todo.description, todo.completed, todo.is_public)

        todo.apply_changes(TodoChanges(), now=NOW)

        assert (todo.title, todo.description, todo.completed, todo.is_public) == before

    def test_completing_sets_completed_at(self, todo):
        """Completion records when it happened."""
        todo.apply_changes(TodoChanges(completed=True), now=NOW)

        assert todo.completed is True
        assert todo.completed_at == NOW

    def test_completing_again_keeps_original_timestamp(self, todo):
        """Re-sending completed=true does not move completed_at."""
        todo.apply_changes(TodoChanges(completed=True), now=NOW)
        todo.apply_changes(TodoChanges(completed=True), now=NOW + timedelta(hours=1))

        assert todo.completed_at == NOW

    def test_reopening_clears_completed_at(self, todo):
        """Marking incomplete clears the completion timestamp."""
        todo.apply_changes(TodoChanges(completed=True), now=NOW)

        todo.apply_changes(TodoChanges(completed=False), now=NOW)

        assert todo.completed is False
        assert todo.completed_at is None

    def test_updates_provided_fields(self, todo):
        """Each provided field is applied."""
        due = NOW + timedelta(days=3)

        todo.apply_changes(
            TodoChanges(
                title=" New title ",
                description="details",
                is_public=True,
                due_date=due,
            ),
            now=NOW,
        )

        assert todo.title == "New title"
        assert todo.description == "details"
        assert todo.is_public is True
        assert todo.due_date == due

    def test_blank_title_update_is_rejected(self, todo):
        """A title cannot be blanked out."""
        with pytest.raises(ValueError):
            todo.apply_changes(TodoChanges(title=" "), now=NOW)

        assert todo.title == "Write report"


class TestTodoId:
    """Tests for the TodoId value object."""

    def test_invalid_id_is_rejected(self):
        with pytest.raises(ValueError, match="Invalid TodoId"):
            TodoId.from_string("42")

    def test_generated_id_round_trips(self):
        todo_id = TodoId.generate()

        assert TodoId.from_string(todo_id.value) == todo_id
