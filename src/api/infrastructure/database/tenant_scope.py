"""Tenant-scoped transactions.

Every statement against a row-policy protected table runs inside a
transaction that first binds the tenant with
``set_config('app.current_tenant_id', :tenant_id, true)``. The third
argument makes the setting transaction-local (the same semantics as
``SET LOCAL``), so PostgreSQL discards it on commit or rollback and a pooled
connection never carries one tenant's binding into another request.
``set_config`` is used instead of ``SET LOCAL`` because utility statements
cannot take bind parameters.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.exceptions import TenantBindingError, TenantNotSetError
from infrastructure.observability.probes import (
    DefaultTenantScopeProbe,
    TenantScopeProbe,
)
from shared_kernel.middleware.tenant_context import (
    SOURCE_SYSTEM,
    TenantContext,
    get_tenant_context,
    tenant_context_scope,
)

TENANT_SETTING = "app.current_tenant_id"

_BIND_TENANT = text(f"SELECT set_config('{TENANT_SETTING}', :tenant_id, true)")
_READ_TENANT = text(f"SELECT current_setting('{TENANT_SETTING}', true)")

T = TypeVar("T")


def _resolve_tenant(tenant_id: str | None) -> TenantContext | None:
    if tenant_id:
        current = get_tenant_context()
        if current is not None and current.tenant_id == tenant_id:
            return current
        return TenantContext(tenant_id=tenant_id, source=SOURCE_SYSTEM)
    return get_tenant_context()


@asynccontextmanager
async def tenant_transaction(
    session: AsyncSession,
    tenant_id: str | None = None,
    probe: TenantScopeProbe | None = None,
) -> AsyncIterator[AsyncSession]:
    """Run a block inside a transaction bound to a single tenant.

    The tenant comes from ``tenant_id`` when given, otherwise from the
    request-scoped tenant context. The same tenant is bound to the context
    carrier for the duration of the block so repositories can apply their
    redundant ``tenant_id`` filters.

    Commits when the block exits normally. Rolls back and re-raises on any
    exception, including task cancellation.

    Args:
        session: A session with no transaction in progress
        tenant_id: Explicit tenant to bind (optional)
        probe: Optional domain probe for observability

    Yields:
        The same session, with the tenant bound

    Raises:
        TenantNotSetError: If no tenant is available. No statement is sent.
        TenantBindingError: If the binding statement fails. The transaction
            is rolled back before this propagates.
    """
    probe = probe or DefaultTenantScopeProbe()

    context = _resolve_tenant(tenant_id)
    if context is None:
        probe.tenant_missing()
        raise TenantNotSetError()

    with tenant_context_scope(context):
        async with session.begin():
            try:
                await session.execute(_BIND_TENANT, {"tenant_id": context.tenant_id})
            except SQLAlchemyError as e:
                probe.tenant_binding_failed(context.tenant_id, e)
                raise TenantBindingError(
                    "Failed to bind tenant to transaction",
                    tenant_id=context.tenant_id,
                ) from e

            probe.tenant_bound(context.tenant_id)

            try:
                yield session
            except BaseException as e:
                probe.scope_rolled_back(context.tenant_id, e)
                raise


async def current_tenant_setting(session: AsyncSession) -> str | None:
    """Read the tenant currently bound on the session's transaction.

    Returns None (or an empty string on connections that previously had a
    transaction-local value) when nothing is bound.
    """
    result = await session.execute(_READ_TENANT)
    return result.scalar_one_or_none()


class TenantScopedTransactionManager:
    """Runs units of work in their own tenant-scoped transaction.

    This is the entry point for tenant-bound work outside an HTTP request,
    such as scripts or seeding jobs. Request handlers instead
    call ``tenant_transaction`` on the request session.

    Each call checks a connection out of the pool, binds the tenant,
    runs the work, commits or rolls back and returns the connection.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: TenantScopeProbe | None = None,
    ):
        self._session_factory = session_factory
        self._probe = probe or DefaultTenantScopeProbe()

    async def run(
        self,
        tenant_id: str | None,
        work: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """Execute ``work`` inside a transaction bound to ``tenant_id``.

        Use this for units of work that have no request session, for example
        a script seeding one tenant's data.

        Args:
            tenant_id: Tenant to bind; falls back to the request context
            work: Coroutine function receiving the bound session

        Returns:
            Whatever ``work`` returns, after the transaction committed
        """
        async with self._session_factory() as session:
            async with tenant_transaction(session, tenant_id, probe=self._probe):
                return await work(session)
