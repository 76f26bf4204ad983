"""Authentication shared kernel module."""

from shared_kernel.auth.jwt_service import (
    InvalidTokenError,
    JWTService,
    TokenClaims,
    TokenPair,
    TokenType,
)
from shared_kernel.auth.observability import (
    DefaultJWTServiceProbe,
    JWTServiceProbe,
)

__all__ = [
    "DefaultJWTServiceProbe",
    "InvalidTokenError",
    "JWTService",
    "JWTServiceProbe",
    "TokenClaims",
    "TokenPair",
    "TokenType",
]
