"""PostgreSQL implementation of ITenantRepository.

Tenants are a directory table without a row policy, so these lookups work
before any tenant has been bound to the transaction.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId, TenantSlug
from iam.infrastructure.models import TenantModel
from iam.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from iam.ports.exceptions import DuplicateTenantSlugError
from iam.ports.repositories import ITenantRepository


class TenantRepository(ITenantRepository):
    """Repository managing PostgreSQL storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def save(self, tenant: Tenant) -> None:
        """Persist tenant metadata to PostgreSQL.

        Args:
            tenant: The Tenant aggregate to persist

        Raises:
            DuplicateTenantSlugError: If tenant slug already exists
        """
        try:
            stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model:
                # The slug is immutable; only the display name can change
                model.name = tenant.name
            else:
                model = TenantModel(
                    id=tenant.id.value,
                    name=tenant.name,
                    slug=tenant.slug.value,
                )
                self._session.add(model)

            # Flush to surface unique violations here rather than at commit
            await self._session.flush()

        except IntegrityError as e:
            if "uq_tenants_slug" in str(e):
                self._probe.duplicate_tenant_slug(tenant.slug.value)
                raise DuplicateTenantSlugError(
                    f"Tenant '{tenant.slug.value}' already exists"
                ) from e
            raise

        tenant.created_at = model.created_at
        tenant.updated_at = model.updated_at
        self._probe.tenant_saved(tenant.id.value, tenant.slug.value)

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Fetch tenant metadata from PostgreSQL.

        Args:
            tenant_id: The unique identifier of the tenant

        Returns:
            The Tenant aggregate, or None if not found
        """
        stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.tenant_not_found(tenant_id.value)
            return None

        return self._to_domain(model)

    async def get_by_slug(self, slug: TenantSlug) -> Tenant | None:
        """Retrieve a tenant by slug.

        Args:
            slug: The normalized tenant slug

        Returns:
            The Tenant aggregate, or None if not found
        """
        stmt = select(TenantModel).where(TenantModel.slug == slug.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.tenant_not_found(slug.value)
            return None

        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            slug=TenantSlug(value=model.slug),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
