"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Args:
            value: ULID string

        Returns:
            TenantId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        return cls(value=value)


class UserRole(StrEnum):
    """Role of a user within their tenant."""

    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class TenantSlug:
    """URL-safe handle users type to pick their tenant at login.

    Normalized to lowercase. Allowed characters are ASCII letters, digits
    and hyphens, and the slug may not start or end with a hyphen.
    """

    value: str

    MAX_LENGTH = 63

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> TenantSlug:
        """Normalize and validate a slug.

        Raises:
            ValueError: If the slug is empty, too long or has invalid characters
        """
        slug = value.strip().lower()
        if not slug or len(slug) > cls.MAX_LENGTH:
            raise ValueError(f"Invalid tenant slug: {value!r}")
        if slug.startswith("-") or slug.endswith("-"):
            raise ValueError(f"Invalid tenant slug: {value!r}")
        if not all(c.isascii() and (c.isalnum() or c == "-") for c in slug):
            raise ValueError(f"Invalid tenant slug: {value!r}")
        return cls(value=slug)
