"""SQLAlchemy ORM model for the tenants table.

Tenants are the top-level isolation boundary. The table itself is a
directory without a row policy: login and registration look tenants up by
slug before any tenant is bound.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    Note: Tenant slugs are globally unique across the entire system.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(63), nullable=False, unique=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, slug={self.slug})>"
