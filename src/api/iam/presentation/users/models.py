"""Request and response models for user API endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from iam.domain.aggregates import User


class UserResponse(BaseModel):
    """Response containing a user's profile.

    The password hash and verification token are never exposed.
    """

    id: str = Field(..., description="User ID (ULID format)")
    tenant_id: str = Field(..., description="Tenant ID this user belongs to")
    email: str = Field(..., description="Email address")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="Role within the tenant")
    email_verified: bool = Field(..., description="Whether the email is verified")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response.

        Args:
            user: User domain aggregate

        Returns:
            UserResponse with profile details
        """
        return cls(
            id=user.id.value,
            tenant_id=user.tenant_id.value,
            email=user.email,
            name=user.name,
            role=user.role.value,
            email_verified=user.email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UpdateUserRequest(BaseModel):
    """Request to update the caller's profile.

    Omitted fields are left unchanged.
    """

    name: str | None = Field(
        None,
        max_length=255,
        description="New display name",
        examples=["Ada Lovelace"],
    )
