"""Tenant aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from iam.domain.value_objects import TenantId, TenantSlug


@dataclass
class Tenant:
    """Tenant aggregate representing an organization in the system.

    Tenants are the top-level isolation boundary. All user and todo data
    is partitioned by tenant, and the database row policies compare rows
    against the tenant bound to the current transaction.

    Business rules:
    - Slugs are globally unique
    - A tenant's id and slug never change
    - Tenants are never deleted
    """

    id: TenantId
    name: str
    slug: TenantSlug
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(cls, slug: TenantSlug, name: str | None = None) -> Tenant:
        """Factory method for creating a new tenant.

        Tenants created during self-service registration are named after
        their slug.

        Args:
            slug: The validated tenant slug
            name: Display name (defaults to the slug)

        Returns:
            A new Tenant aggregate
        """
        return cls(
            id=TenantId.generate(),
            name=name or slug.value,
            slug=slug,
        )

    def __eq__(self, other: object) -> bool:
        """Tenants are equal if they have the same ID."""
        if not isinstance(other, Tenant):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
