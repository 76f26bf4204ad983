"""Tenant context value object and request-scoped carrier.

The tenant context is the only input the database row policies trust, so
it is only ever created from a verified credential (token claims) or from
a tenant that the auth flow itself resolved by slug. It is carried on a
``ContextVar`` so each asyncio task (one per request) sees its own value;
nothing is stored in module-level mutable state.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass

from shared_kernel.exceptions import TenantNotSetError

SOURCE_TOKEN = "token"
SOURCE_SYSTEM = "system"


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    Attributes:
        tenant_id: The tenant identifier as a string.
        source: How the tenant was resolved - 'token' if taken from the
            claims of a validated access token, 'system' if resolved by the
            authentication flow itself (registration, login, refresh).
    """

    tenant_id: str
    source: str = SOURCE_TOKEN

    def __post_init__(self) -> None:
        if not self.tenant_id:
            raise TenantNotSetError("tenant context requires a tenant ID")


_current_tenant: ContextVar[TenantContext | None] = ContextVar(
    "current_tenant", default=None
)


def bind_tenant_context(context: TenantContext) -> Token[TenantContext | None]:
    """Attach a tenant context to the current task.

    Returns:
        Token to pass to reset_tenant_context() when the request ends
    """
    return _current_tenant.set(context)


def reset_tenant_context(token: Token[TenantContext | None]) -> None:
    """Restore the tenant context that was active before bind_tenant_context()."""
    _current_tenant.reset(token)


def get_tenant_context() -> TenantContext | None:
    """Return the tenant context bound to the current task, if any."""
    return _current_tenant.get()


def require_tenant_id() -> str:
    """Return the bound tenant ID or fail closed.

    Raises:
        TenantNotSetError: If no tenant context is bound
    """
    context = _current_tenant.get()
    if context is None:
        raise TenantNotSetError()
    return context.tenant_id


@contextmanager
def tenant_context_scope(context: TenantContext) -> Iterator[TenantContext]:
    """Bind a tenant context for the duration of a block."""
    token = bind_tenant_context(context)
    try:
        yield context
    finally:
        reset_tenant_context(token)
