"""Unit tests for TodoService.

Covers the ownership and visibility rules on top of tenant isolation,
pagination normalization and error translation.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import OperationalError

from iam.application.value_objects import CurrentUser
from iam.domain.value_objects import TenantId, UserId, UserRole
from shared_kernel.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)
from todo.application.observability import TodoServiceProbe
from todo.application.services import TodoService
from todo.application.value_objects import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from todo.domain.aggregates import Todo
from todo.domain.value_objects import TodoChanges, TodoId
from todo.ports.exceptions import TodoNotFoundError

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def mock_probe():
    """Create mock todo service probe."""
    return create_autospec(TodoServiceProbe, instance=True)


@pytest.fixture
def todo_service(todo_repository, user_repository, mock_session, mock_probe):
    """TodoService wired to in-memory repositories."""
    return TodoService(
        todo_repository=todo_repository,
        user_repository=user_repository,
        session=mock_session,
        probe=mock_probe,
        clock=lambda: NOW,
    )


@pytest.fixture
def teammate(tenant_id) -> CurrentUser:
    """Another user of the caller's tenant."""
    return CurrentUser(
        user_id=UserId.generate(),
        tenant_id=tenant_id,
        email="bob@example.com",
        role=UserRole.MEMBER,
    )


@pytest.fixture
def outsider() -> CurrentUser:
    """A user of a different tenant."""
    return CurrentUser(
        user_id=UserId.generate(),
        tenant_id=TenantId.generate(),
        email="carol@example.com",
        role=UserRole.MEMBER,
    )


def _seed(repository, owner: CurrentUser, title: str, is_public: bool = False) -> Todo:
    return repository.seed(
        Todo.create(
            tenant_id=owner.tenant_id,
            user_id=owner.user_id,
            title=title,
            is_public=is_public,
        )
    )


class TestCreateTodo:
    """Tests for create_todo."""

    @pytest.mark.asyncio
    async def test_creates_todo_owned_by_caller(
        self, todo_service, todo_repository, current_user, mock_session, mock_probe
    ):
        """The owner and tenant come from the caller."""
        todo = await todo_service.create_todo(current_user, title="Write report")

        assert todo.user_id == current_user.user_id
        assert todo.tenant_id == current_user.tenant_id
        assert todo.id.value in todo_repository.rows
        params = mock_session.execute.await_args.args[1]
        assert params == {"tenant_id": current_user.tenant_id.value}
        mock_probe.todo_created.assert_called_once_with(
            todo.id.value, current_user.user_id.value, False
        )

    @pytest.mark.asyncio
    async def test_blank_title_is_bad_request(
        self, todo_service, current_user, mock_session
    ):
        """Validation fails before any transaction is opened."""
        with pytest.raises(BadRequestError, match="title is required"):
            await todo_service.create_todo(current_user, title="  ")

        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_datastore_failure_is_internal_error(
        self, todo_service, todo_repository, current_user, mock_probe
    ):
        """Raw datastore errors do not cross the service boundary."""
        todo_repository.create = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("down"))
        )

        with pytest.raises(InternalError, match="failed to create todo"):
            await todo_service.create_todo(current_user, title="Write report")

        mock_probe.todo_operation_failed.assert_called_once()
        mock_probe.todo_created.assert_not_called()


class TestGetTodo:
    """Tests for get_todo visibility rules."""

    @pytest.mark.asyncio
    async def test_owner_reads_private_todo(
        self, todo_service, todo_repository, current_user
    ):
        todo = _seed(todo_repository, current_user, "mine")

        assert await todo_service.get_todo(current_user, todo.id) == todo

    @pytest.mark.asyncio
    async def test_teammate_reads_public_todo(
        self, todo_service, todo_repository, current_user, teammate
    ):
        todo = _seed(todo_repository, current_user, "shared", is_public=True)

        assert await todo_service.get_todo(teammate, todo.id) == todo

    @pytest.mark.asyncio
    async def test_teammate_is_forbidden_from_private_todo(
        self, todo_service, todo_repository, current_user, teammate, mock_probe
    ):
        todo = _seed(todo_repository, current_user, "private")

        with pytest.raises(ForbiddenError, match="not allowed to access this todo"):
            await todo_service.get_todo(teammate, todo.id)

        mock_probe.todo_access_denied.assert_called_once_with(
            todo.id.value, teammate.user_id.value, "get"
        )

    @pytest.mark.asyncio
    async def test_other_tenant_sees_not_found_even_for_public_todo(
        self, todo_service, todo_repository, current_user, outsider
    ):
        """Cross-tenant reads look exactly like missing todos."""
        todo = _seed(todo_repository, current_user, "shared", is_public=True)

        with pytest.raises(NotFoundError, match="todo not found"):
            await todo_service.get_todo(outsider, todo.id)

    @pytest.mark.asyncio
    async def test_missing_todo_is_not_found(self, todo_service, current_user):
        with pytest.raises(NotFoundError, match="todo not found"):
            await todo_service.get_todo(current_user, TodoId.generate())


class TestUpdateTodo:
    """Tests for update_todo ownership rules."""

    @pytest.mark.asyncio
    async def test_owner_updates_todo(
        self, todo_service, todo_repository, current_user, mock_probe
    ):
        todo = _seed(todo_repository, current_user, "draft")

        updated = await todo_service.update_todo(
            current_user, todo.id, TodoChanges(title="final", completed=True)
        )

        assert updated.title == "final"
        assert updated.completed is True
        assert updated.completed_at == NOW
        mock_probe.todo_updated.assert_called_once_with(
            todo.id.value, current_user.user_id.value
        )

    @pytest.mark.asyncio
    async def test_teammate_cannot_update_public_todo(
        self, todo_service, todo_repository, current_user, teammate
    ):
        """Public todos are readable by the tenant but only the owner may edit."""
        todo = _seed(todo_repository, current_user, "shared", is_public=True)

        with pytest.raises(ForbiddenError, match="not allowed to update this todo"):
            await todo_service.update_todo(teammate, todo.id, TodoChanges(title="x"))

        assert todo_repository.rows[todo.id.value].title == "shared"

    @pytest.mark.asyncio
    async def test_other_tenant_update_is_not_found(
        self, todo_service, todo_repository, current_user, outsider
    ):
        todo = _seed(todo_repository, current_user, "mine")

        with pytest.raises(NotFoundError):
            await todo_service.update_todo(outsider, todo.id, TodoChanges(title="x"))

    @pytest.mark.asyncio
    async def test_blank_title_is_bad_request(
        self, todo_service, todo_repository, current_user
    ):
        todo = _seed(todo_repository, current_user, "mine")

        with pytest.raises(BadRequestError):
            await todo_service.update_todo(current_user, todo.id, TodoChanges(title=""))

    @pytest.mark.asyncio
    async def test_row_vanishing_mid_update_is_not_found(
        self, todo_service, todo_repository, current_user
    ):
        """A concurrent delete between read and write surfaces as not found."""
        todo = _seed(todo_repository, current_user, "mine")

        async def vanish(_todo):
            raise TodoNotFoundError(_todo.id.value)

        todo_repository.update = vanish

        with pytest.raises(NotFoundError, match="todo not found"):
            await todo_service.update_todo(
                current_user, todo.id, TodoChanges(title="x")
            )


class TestDeleteTodo:
    """Tests for delete_todo ownership rules."""

    @pytest.mark.asyncio
    async def test_owner_deletes_todo(
        self, todo_service, todo_repository, current_user, mock_probe
    ):
        todo = _seed(todo_repository, current_user, "mine")

        await todo_service.delete_todo(current_user, todo.id)

        assert todo.id.value not in todo_repository.rows
        mock_probe.todo_deleted.assert_called_once()

    @pytest.mark.asyncio
    async def test_teammate_cannot_delete(
        self, todo_service, todo_repository, current_user, teammate
    ):
        todo = _seed(todo_repository, current_user, "shared", is_public=True)

        with pytest.raises(ForbiddenError, match="not allowed to delete this todo"):
            await todo_service.delete_todo(teammate, todo.id)

        assert todo.id.value in todo_repository.rows

    @pytest.mark.asyncio
    async def test_other_tenant_delete_is_not_found(
        self, todo_service, todo_repository, current_user, outsider
    ):
        todo = _seed(todo_repository, current_user, "mine")

        with pytest.raises(NotFoundError):
            await todo_service.delete_todo(outsider, todo.id)

        assert todo.id.value in todo_repository.rows


class TestListMyTodos:
    """Tests for listing the caller's todos."""

    @pytest.mark.asyncio
    async def test_lists_only_callers_todos_newest_first(
        self, todo_service, todo_repository, current_user, teammate, outsider
    ):
        first = _seed(todo_repository, current_user, "first")
        second = _seed(todo_repository, current_user, "second")
        _seed(todo_repository, teammate, "teammate's")
        _seed(todo_repository, outsider, "outsider's")

        page = await todo_service.list_my_todos(current_user)

        assert page.todos == [second, first]
        assert page.total == 2
        assert page.creators == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("limit", "expected"),
        [(0, DEFAULT_PAGE_LIMIT), (-5, DEFAULT_PAGE_LIMIT), (500, MAX_PAGE_LIMIT), (7, 7)],
    )
    async def test_limit_is_normalized(
        self, todo_service, current_user, limit, expected
    ):
        page = await todo_service.list_my_todos(current_user, limit=limit)

        assert page.page.limit == expected

    @pytest.mark.asyncio
    async def test_offset_pages_through_results(
        self, todo_service, todo_repository, current_user
    ):
        todos = [_seed(todo_repository, current_user, f"t{i}") for i in range(5)]

        page = await todo_service.list_my_todos(current_user, limit=2, offset=2)

        assert page.todos == [todos[2], todos[1]]
        assert page.total == 5

    @pytest.mark.asyncio
    async def test_negative_offset_starts_from_beginning(
        self, todo_service, current_user
    ):
        page = await todo_service.list_my_todos(current_user, offset=-3)

        assert page.page.offset == 0


class TestListPublicTodos:
    """Tests for listing the tenant's public todos."""

    @pytest.mark.asyncio
    async def test_lists_public_todos_of_own_tenant_with_creators(
        self,
        todo_service,
        todo_repository,
        user_repository,
        tenant_id,
        outsider,
    ):
        alice = user_repository.seed(tenant_id, "Alice")
        bob = user_repository.seed(tenant_id, "Bob")
        alice_user = CurrentUser(
            user_id=alice.id, tenant_id=tenant_id, email=alice.email, role=alice.role
        )
        bob_user = CurrentUser(
            user_id=bob.id, tenant_id=tenant_id, email=bob.email, role=bob.role
        )

        shared_by_alice = _seed(todo_repository, alice_user, "a", is_public=True)
        _seed(todo_repository, alice_user, "private")
        shared_by_bob = _seed(todo_repository, bob_user, "b", is_public=True)
        _seed(todo_repository, outsider, "foreign", is_public=True)

        page = await todo_service.list_public_todos(bob_user)

        assert page.todos == [shared_by_bob, shared_by_alice]
        assert page.total == 2
        assert page.creators[alice.id.value].name == "Alice"
        assert page.creators[bob.id.value].name == "Bob"

    @pytest.mark.asyncio
    async def test_datastore_failure_is_internal_error(
        self, todo_service, todo_repository, current_user
    ):
        todo_repository.find_public = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("down"))
        )

        with pytest.raises(InternalError, match="failed to get public todos"):
            await todo_service.list_public_todos(current_user)
