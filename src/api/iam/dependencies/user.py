from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from iam.application.services import UserService
from iam.application.value_objects import CurrentUser
from iam.dependencies.authentication import authenticate
from iam.dependencies.tenant_context import get_tenant_context
from iam.domain.value_objects import TenantId, UserId, UserRole
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_session
from shared_kernel.auth import TokenClaims
from shared_kernel.middleware.tenant_context import TenantContext


async def get_current_user(
    claims: Annotated[TokenClaims, Depends(authenticate)],
    tenant_context: Annotated[TenantContext, Depends(get_tenant_context)],
) -> CurrentUser:
    """Build the authenticated caller from validated access token claims.

    Depends on ``get_tenant_context`` so that the caller's tenant is bound
    before any route body runs.

    Args:
        claims: Cached claims from ``authenticate``
        tenant_context: Tenant bound for this request

    Returns:
        CurrentUser with user_id, tenant_id, email and role

    Raises:
        HTTPException 401: If the claims do not describe a valid user
    """
    try:
        return CurrentUser(
            user_id=UserId.from_string(claims.user_id),
            tenant_id=TenantId(value=tenant_context.tenant_id),
            email=claims.email,
            role=UserRole(claims.role),
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def get_user_service_probe() -> UserServiceProbe:
    """Get UserServiceProbe instance.

    Returns:
        DefaultUserServiceProbe instance for observability
    """
    return DefaultUserServiceProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> UserRepository:
    """Get UserRepository instance.

    Args:
        session: Async database session

    Returns:
        UserRepository instance
    """
    return UserRepository(session=session)


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        user_repo: User repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: User service probe for observability

    Returns:
        UserService instance
    """
    return UserService(user_repository=user_repo, session=session, probe=probe)
