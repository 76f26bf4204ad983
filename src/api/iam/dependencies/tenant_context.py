"""Tenant context FastAPI dependency.

Derives the request's tenant from the tenant_id claim of the validated
access token. No header, query parameter or body field can influence it.

While the request runs, the context is bound to the task-local carrier so
repositories can read it, and tenant_id/user_id are bound into structlog's
contextvars so every log line of the request carries them.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        tenant: Annotated[TenantContext, Depends(get_tenant_context)],
    ):
        # tenant.tenant_id comes from the verified credential
        ...
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, status

from iam.dependencies.authentication import authenticate
from iam.domain.value_objects import TenantId
from shared_kernel.auth import TokenClaims
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import (
    SOURCE_TOKEN,
    TenantContext,
    bind_tenant_context,
    reset_tenant_context,
)


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance for tenant context resolution.

    Returns:
        DefaultTenantContextProbe instance for observability
    """
    return DefaultTenantContextProbe()


async def get_tenant_context(
    claims: Annotated[TokenClaims, Depends(authenticate)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> AsyncIterator[TenantContext]:
    """Bind the tenant of the authenticated caller for the request.

    Raises:
        HTTPException 401: If the token's tenant claim is malformed
    """
    try:
        tenant_id = TenantId.from_string(claims.tenant_id)
    except ValueError as e:
        probe.tenant_claim_invalid(user_id=claims.user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    context = TenantContext(tenant_id=tenant_id.value, source=SOURCE_TOKEN)
    token = bind_tenant_context(context)
    structlog.contextvars.bind_contextvars(
        tenant_id=context.tenant_id, user_id=claims.user_id
    )
    probe.tenant_resolved_from_token(
        tenant_id=context.tenant_id, user_id=claims.user_id
    )

    try:
        yield context
    finally:
        structlog.contextvars.unbind_contextvars("tenant_id", "user_id")
        reset_tenant_context(token)
