"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from iam.domain.value_objects import TenantId, UserId, UserRole


@dataclass
class User:
    """User aggregate representing a person within one tenant.

    The same email may exist in several tenants as distinct users; within a
    tenant the email is unique.

    Business rules:
    - tenant_id never changes after creation
    - Self-registered users start as members with an unverified email
    - A verification token is single use and expires
    """

    id: UserId
    tenant_id: TenantId
    email: str
    password_hash: str
    name: str
    role: UserRole = UserRole.MEMBER
    email_verified: bool = False
    verification_token: str | None = None
    verification_token_expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def register(
        cls,
        tenant_id: TenantId,
        email: str,
        password_hash: str,
        name: str,
        verification_token: str,
        verification_ttl: timedelta,
        now: datetime,
    ) -> User:
        """Factory method for self-service registration.

        Args:
            tenant_id: Tenant the user joins
            email: Normalized email
            password_hash: Already hashed password
            name: Display name
            verification_token: Token sent to the user to confirm their email
            verification_ttl: How long the token remains valid
            now: Current time

        Returns:
            A new member User with a pending email verification
        """
        return cls(
            id=UserId.generate(),
            tenant_id=tenant_id,
            email=email,
            password_hash=password_hash,
            name=name,
            role=UserRole.MEMBER,
            email_verified=False,
            verification_token=verification_token,
            verification_token_expires_at=now + verification_ttl,
        )

    def verification_expired(self, now: datetime) -> bool:
        """Check whether the pending verification token has expired."""
        if self.verification_token_expires_at is None:
            return False
        return now > self.verification_token_expires_at

    def mark_email_verified(self) -> None:
        """Mark the email verified and consume the verification token."""
        self.email_verified = True
        self.verification_token = None
        self.verification_token_expires_at = None

    def rename(self, name: str) -> None:
        """Change the display name."""
        self.name = name

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.email})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
