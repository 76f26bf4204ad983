"""Unit tests for TodoRepository query construction.

Row filtering itself is enforced by PostgreSQL and covered by the
integration tests. These tests check the redundant tenant filter and the
fail-closed behavior when no tenant is bound.
"""

from unittest.mock import MagicMock, create_autospec

import pytest

from iam.domain.value_objects import TenantId, UserId
from shared_kernel.exceptions import TenantNotSetError
from shared_kernel.middleware.tenant_context import (
    TenantContext,
    tenant_context_scope,
)
from todo.domain.aggregates import Todo
from todo.domain.value_objects import TodoId
from todo.infrastructure.observability import TodoRepositoryProbe
from todo.infrastructure.todo_repository import TodoRepository
from todo.ports.exceptions import TodoNotFoundError


@pytest.fixture
def mock_probe():
    """Create mock repository probe."""
    return create_autospec(TodoRepositoryProbe, instance=True)


@pytest.fixture
def repository(mock_session, mock_probe) -> TodoRepository:
    return TodoRepository(session=mock_session, probe=mock_probe)


def _empty_result() -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    result.scalars.return_value.all.return_value = []
    result.rowcount = 0
    return result


def _statement_sql(mock_session) -> str:
    statement = mock_session.execute.await_args.args[0]
    return str(statement.compile(compile_kwargs={"literal_binds": True}))


class TestFailClosed:
    """Repository calls without a bound tenant never reach the database."""

    @pytest.mark.asyncio
    async def test_find_by_id_requires_tenant(self, repository, mock_session):
        with pytest.raises(TenantNotSetError):
            await repository.find_by_id(TodoId.generate())

        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_requires_tenant(self, repository, mock_session):
        with pytest.raises(TenantNotSetError):
            await repository.find_public(limit=20, offset=0)

        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_requires_tenant(self, repository, mock_session):
        with pytest.raises(TenantNotSetError):
            await repository.delete(TodoId.generate())

        mock_session.execute.assert_not_awaited()


class TestTenantFilter:
    """Every query carries the bound tenant as an explicit predicate."""

    @pytest.mark.asyncio
    async def test_find_by_id_filters_on_bound_tenant(
        self, repository, mock_session, mock_probe
    ):
        mock_session.execute.return_value = _empty_result()
        todo_id = TodoId.generate()

        with tenant_context_scope(TenantContext(tenant_id="tenant-a")):
            assert await repository.find_by_id(todo_id) is None

        sql = _statement_sql(mock_session)
        assert "todos.tenant_id = 'tenant-a'" in sql
        assert f"todos.id = '{todo_id.value}'" in sql
        mock_probe.todo_not_found.assert_called_once_with(todo_id.value)

    @pytest.mark.asyncio
    async def test_find_by_user_orders_newest_first_and_pages(
        self, repository, mock_session
    ):
        mock_session.execute.return_value = _empty_result()
        user_id = UserId.generate()

        with tenant_context_scope(TenantContext(tenant_id="tenant-a")):
            await repository.find_by_user_id(user_id, limit=5, offset=10)

        sql = _statement_sql(mock_session)
        assert "todos.tenant_id = 'tenant-a'" in sql
        assert f"todos.user_id = '{user_id.value}'" in sql
        assert "ORDER BY todos.created_at DESC, todos.id DESC" in sql
        assert "LIMIT 5" in sql
        assert "OFFSET 10" in sql

    @pytest.mark.asyncio
    async def test_public_listing_filters_public_flag(self, repository, mock_session):
        mock_session.execute.return_value = _empty_result()

        with tenant_context_scope(TenantContext(tenant_id="tenant-a")):
            await repository.find_public(limit=20, offset=0)

        sql = _statement_sql(mock_session)
        assert "todos.tenant_id = 'tenant-a'" in sql
        assert "todos.is_public IS" in sql

    @pytest.mark.asyncio
    async def test_delete_of_invisible_row_returns_false(
        self, repository, mock_session
    ):
        mock_session.execute.return_value = _empty_result()

        with tenant_context_scope(TenantContext(tenant_id="tenant-a")):
            assert await repository.delete(TodoId.generate()) is False

        assert "todos.tenant_id = 'tenant-a'" in _statement_sql(mock_session)


class TestWrites:
    """Tests for create and update."""

    @pytest.mark.asyncio
    async def test_create_uses_aggregate_tenant(self, repository, mock_session):
        """The inserted row carries the todo's own tenant."""
        tenant_id = TenantId.generate()
        todo = Todo.create(tenant_id, UserId.generate(), "Write report")

        with tenant_context_scope(TenantContext(tenant_id=tenant_id.value)):
            await repository.create(todo)

        model = mock_session.add.call_args.args[0]
        assert model.tenant_id == tenant_id.value
        assert model.title == "Write report"
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_of_invisible_row_raises(self, repository, mock_session):
        mock_session.execute.return_value = _empty_result()
        todo = Todo.create(TenantId.generate(), UserId.generate(), "Write report")

        with tenant_context_scope(TenantContext(tenant_id=todo.tenant_id.value)):
            with pytest.raises(TodoNotFoundError):
                await repository.update(todo)

        mock_session.flush.assert_not_awaited()
