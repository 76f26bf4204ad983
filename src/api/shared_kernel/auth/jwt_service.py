"""JWT issuance and validation for first-party credentials.

Tokens are HMAC-signed and carry the user's identity together with the
tenant they belong to. The tenant claim is the only source the request
pipeline uses to bind a tenant context.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError
from ulid import ULID

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTServiceProbe


class TokenType(StrEnum):
    """Purpose of a signed token."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Validated JWT claims."""

    user_id: str
    tenant_id: str
    email: str
    role: str
    token_type: TokenType
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh token issued together.

    Attributes:
        access_token: Short-lived bearer token for API calls
        refresh_token: Long-lived token accepted only by the refresh flow
        expires_in: Access token lifetime in seconds
    """

    access_token: str
    refresh_token: str
    expires_in: int


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


_REQUIRED_CLAIMS = ("sub", "tenant_id", "email", "role", "token_type", "exp")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JWTService:
    """Issues and validates HMAC-signed access and refresh tokens."""

    def __init__(
        self,
        secret: str,
        issuer: str,
        access_token_ttl: timedelta,
        refresh_token_ttl: timedelta,
        probe: JWTServiceProbe,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the JWT service.

        Args:
            secret: HMAC signing secret.
            issuer: Value for the iss claim, verified on decode.
            access_token_ttl: Lifetime of access tokens.
            refresh_token_ttl: Lifetime of refresh tokens.
            probe: Observability probe for logging events.
            algorithm: JWS algorithm (default: HS256).
            clock: Source of the current time, overridable in tests.
        """
        self._secret = secret
        self._issuer = issuer
        self._access_token_ttl = access_token_ttl
        self._refresh_token_ttl = refresh_token_ttl
        self._probe = probe
        self._algorithm = algorithm
        self._clock = clock

    def issue_token_pair(
        self, user_id: str, tenant_id: str, email: str, role: str
    ) -> TokenPair:
        """Issue a new access/refresh pair for a user.

        Args:
            user_id: Subject of both tokens
            tenant_id: Tenant the user belongs to
            email: User's email
            role: User's role within the tenant

        Returns:
            TokenPair with both encoded tokens
        """
        access_token = self._encode(
            user_id, tenant_id, email, role, TokenType.ACCESS, self._access_token_ttl
        )
        refresh_token = self._encode(
            user_id, tenant_id, email, role, TokenType.REFRESH, self._refresh_token_ttl
        )
        self._probe.token_pair_issued(user_id=user_id, tenant_id=tenant_id)

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(self._access_token_ttl.total_seconds()),
        )

    def validate_access_token(self, token: str) -> TokenClaims:
        """Validate a token presented as a bearer credential.

        Raises:
            InvalidTokenError: If the token is invalid, expired, or a refresh token
        """
        return self._decode(token, TokenType.ACCESS)

    def validate_refresh_token(self, token: str) -> TokenClaims:
        """Validate a token presented to the refresh flow.

        Raises:
            InvalidTokenError: If the token is invalid, expired, or an access token
        """
        return self._decode(token, TokenType.REFRESH)

    def _encode(
        self,
        user_id: str,
        tenant_id: str,
        email: str,
        role: str,
        token_type: TokenType,
        ttl: timedelta,
    ) -> str:
        now = self._clock()
        claims: dict[str, Any] = {
            "sub": user_id,
            "tenant_id": tenant_id,
            "email": email,
            "role": role,
            "token_type": token_type.value,
            "iss": self._issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": str(ULID()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def _decode(self, token: str, expected_type: TokenType) -> TokenClaims:
        try:
            claims = jwt.decode(
                token=token,
                key=self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={
                    "verify_signature": True,
                    "verify_iss": True,
                    "verify_exp": True,
                    "verify_iat": True,
                    "verify_aud": False,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        missing = [name for name in _REQUIRED_CLAIMS if not claims.get(name)]
        if missing:
            self._probe.token_validation_failed(reason=f"Missing claims: {missing}")
            raise InvalidTokenError(f"Missing required claims: {', '.join(missing)}")

        if claims["token_type"] != expected_type.value:
            self._probe.token_validation_failed(
                reason=f"Expected {expected_type.value} token"
            )
            raise InvalidTokenError(f"Invalid token type: expected {expected_type.value}")

        self._probe.token_validated(user_id=str(claims["sub"]))

        return TokenClaims(
            user_id=str(claims["sub"]),
            tenant_id=str(claims["tenant_id"]),
            email=str(claims["email"]),
            role=str(claims["role"]),
            token_type=expected_type,
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )
