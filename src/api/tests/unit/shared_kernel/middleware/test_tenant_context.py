"""Unit tests for the request-scoped tenant context carrier."""

import asyncio

import pytest

from shared_kernel.exceptions import TenantNotSetError
from shared_kernel.middleware.tenant_context import (
    SOURCE_SYSTEM,
    SOURCE_TOKEN,
    TenantContext,
    bind_tenant_context,
    get_tenant_context,
    require_tenant_id,
    reset_tenant_context,
    tenant_context_scope,
)


class TestTenantContext:
    """Tests for the TenantContext value object."""

    def test_defaults_to_token_source(self):
        """Contexts are assumed to come from a validated token."""
        context = TenantContext(tenant_id="01HN0000000000000000000000")

        assert context.source == SOURCE_TOKEN

    def test_empty_tenant_id_is_rejected(self):
        """A context can never carry an empty tenant."""
        with pytest.raises(TenantNotSetError):
            TenantContext(tenant_id="")

    def test_is_immutable(self):
        """Tenant contexts cannot be changed after creation."""
        context = TenantContext(tenant_id="tenant-a")

        with pytest.raises(AttributeError):
            context.tenant_id = "tenant-b"  # type: ignore[misc]


class TestBindAndReset:
    """Tests for binding and resetting the carrier."""

    def test_nothing_bound_by_default(self):
        """With no request in flight there is no tenant."""
        assert get_tenant_context() is None

    def test_bind_then_reset_restores_previous(self):
        """reset_tenant_context should restore the value before binding."""
        token = bind_tenant_context(TenantContext(tenant_id="tenant-a"))
        assert require_tenant_id() == "tenant-a"

        reset_tenant_context(token)

        assert get_tenant_context() is None

    def test_scopes_nest(self):
        """An inner scope shadows the outer one and restores it on exit."""
        with tenant_context_scope(TenantContext(tenant_id="outer")):
            with tenant_context_scope(
                TenantContext(tenant_id="inner", source=SOURCE_SYSTEM)
            ):
                assert require_tenant_id() == "inner"
            assert require_tenant_id() == "outer"

        assert get_tenant_context() is None

    def test_scope_resets_on_error(self):
        """The scope is unwound even when the block raises."""
        with pytest.raises(ValueError):
            with tenant_context_scope(TenantContext(tenant_id="tenant-a")):
                raise ValueError("boom")

        assert get_tenant_context() is None


class TestRequireTenantId:
    """Tests for the fail-closed accessor."""

    def test_raises_when_unbound(self):
        """Without a bound tenant the accessor refuses to answer."""
        with pytest.raises(TenantNotSetError, match="tenant ID not found"):
            require_tenant_id()

    def test_returns_bound_tenant(self):
        """The bound tenant is returned as a plain string."""
        with tenant_context_scope(TenantContext(tenant_id="tenant-a")):
            assert require_tenant_id() == "tenant-a"


class TestTaskIsolation:
    """Tests that concurrent tasks never see each other's tenant."""

    @pytest.mark.asyncio
    async def test_concurrent_tasks_keep_their_own_tenant(self):
        """Each asyncio task observes only the tenant it bound."""

        async def handle(tenant_id: str) -> list[str]:
            seen = []
            with tenant_context_scope(TenantContext(tenant_id=tenant_id)):
                for _ in range(5):
                    await asyncio.sleep(0)
                    seen.append(require_tenant_id())
            return seen

        results = await asyncio.gather(*(handle(f"tenant-{i}") for i in range(10)))

        for i, seen in enumerate(results):
            assert seen == [f"tenant-{i}"] * 5

    @pytest.mark.asyncio
    async def test_child_task_binding_does_not_leak_to_parent(self):
        """A tenant bound in a child task is invisible to the parent."""

        async def child() -> None:
            bind_tenant_context(TenantContext(tenant_id="tenant-a"))

        await asyncio.create_task(child())

        assert get_tenant_context() is None
