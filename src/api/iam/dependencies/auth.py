from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthServiceProbe,
    DefaultAuthServiceProbe,
)
from iam.application.services import AuthService
from iam.dependencies.authentication import get_jwt_service
from iam.dependencies.user import get_user_repository
from iam.infrastructure.tenant_repository import TenantRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_session
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import JWTService


def get_auth_service_probe() -> AuthServiceProbe:
    """Get AuthServiceProbe instance.

    Returns:
        DefaultAuthServiceProbe instance for observability
    """
    return DefaultAuthServiceProbe()


def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TenantRepository:
    """Get TenantRepository instance.

    Args:
        session: Async database session

    Returns:
        TenantRepository instance
    """
    return TenantRepository(session=session)


def get_auth_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
    probe: Annotated[AuthServiceProbe, Depends(get_auth_service_probe)],
) -> AuthService:
    """Get AuthService instance.

    Args:
        tenant_repo: Tenant directory repository
        user_repo: User repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        jwt_service: Issues and validates token pairs
        probe: Auth service probe for observability

    Returns:
        AuthService instance
    """
    settings = get_auth_settings()
    return AuthService(
        tenant_repository=tenant_repo,
        user_repository=user_repo,
        session=session,
        jwt_service=jwt_service,
        probe=probe,
        verification_ttl=timedelta(hours=settings.verification_token_ttl_hours),
    )
