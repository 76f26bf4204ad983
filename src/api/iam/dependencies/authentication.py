from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import (
    DefaultJWTServiceProbe,
    InvalidTokenError,
    JWTService,
    TokenClaims,
)

# Bearer scheme for Swagger UI's Authorize button. Missing credentials are
# reported by _authenticate so the 401 carries a WWW-Authenticate header.
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwt_service() -> JWTService:
    """Get cached JWT service.

    Returns:
        JWTService instance configured from auth settings.
    """
    settings = get_auth_settings()
    return JWTService(
        secret=settings.jwt_secret.get_secret_value(),
        issuer=settings.issuer,
        access_token_ttl=timedelta(minutes=settings.access_token_ttl_minutes),
        refresh_token_ttl=timedelta(days=settings.refresh_token_ttl_days),
        probe=DefaultJWTServiceProbe(),
        algorithm=settings.jwt_algorithm,
    )


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()


async def authenticate(
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> TokenClaims:
    """Validate the Authorization: Bearer access token.

    This is the single source of truth for credential validation. FastAPI
    caches the result per request, so every dependency that needs the
    claims shares one validation.

    Raises:
        HTTPException 401: If the header is missing or the token is invalid
    """
    if credentials is None:
        auth_probe.authentication_failed(reason="Missing authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = jwt_service.validate_access_token(credentials.credentials)
    except InvalidTokenError as e:
        auth_probe.authentication_failed(reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    auth_probe.user_authenticated(user_id=claims.user_id, tenant_id=claims.tenant_id)
    return claims
