"""Request and response models for authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.application.value_objects import AuthResult
from iam.presentation.users.models import UserResponse


class RegisterRequest(BaseModel):
    """Request to register a user, creating the tenant if the slug is new.

    Attributes:
        email: Email address, unique within the tenant
        password: Plaintext password (bcrypt limits input to 72 bytes)
        name: Optional display name
        tenant_slug: Slug of the tenant to join or create
    """

    email: str = Field(
        ...,
        max_length=320,
        description="Email address",
        examples=["ada@example.com"],
    )
    password: str = Field(..., max_length=72, description="Password")
    name: str = Field(
        "",
        max_length=255,
        description="Display name",
        examples=["Ada Lovelace"],
    )
    tenant_slug: str = Field(
        ...,
        max_length=63,
        description="Tenant slug (lowercase letters, digits and hyphens)",
        examples=["acme"],
    )


class LoginRequest(BaseModel):
    """Request to log in to a tenant with email and password."""

    email: str = Field(..., max_length=320, description="Email address")
    password: str = Field(..., max_length=72, description="Password")
    tenant_slug: str = Field(..., max_length=63, description="Tenant slug")


class VerifyEmailRequest(BaseModel):
    """Request to confirm an email address."""

    token: str = Field(..., description="Verification token sent at registration")


class RefreshTokenRequest(BaseModel):
    """Request to exchange a refresh token for a new token pair."""

    refresh_token: str = Field(..., description="Refresh token")


class AuthResponse(BaseModel):
    """Token pair issued on registration, login or refresh.

    Attributes:
        access_token: Bearer token for API calls
        refresh_token: Token accepted only by /auth/refresh
        token_type: Always "Bearer"
        expires_in: Access token lifetime in seconds
        user: The authenticated user
    """

    access_token: str = Field(..., description="Access token (JWT)")
    refresh_token: str = Field(..., description="Refresh token (JWT)")
    token_type: str = Field("Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: UserResponse

    @classmethod
    def from_result(cls, result: AuthResult) -> AuthResponse:
        """Convert an AuthResult to API response."""
        return cls(
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
            token_type="Bearer",
            expires_in=result.tokens.expires_in,
            user=UserResponse.from_domain(result.user),
        )


class MessageResponse(BaseModel):
    """Response carrying a human-readable confirmation."""

    message: str
