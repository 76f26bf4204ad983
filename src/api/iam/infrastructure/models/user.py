"""SQLAlchemy ORM model for the users table.

The table is protected by the tenant isolation row policy; the role the
application connects with only ever sees rows of the tenant bound to the
current transaction.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TenantOwnedMixin, TimestampMixin


class UserModel(Base, TenantOwnedMixin, TimestampMixin):
    """ORM model for users table.

    Note: (tenant_id, email) is unique. The (tenant_id, id) pair is also
    unique so todos can reference both columns together, which keeps a
    todo from pointing at a user of another tenant.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email"),
        UniqueConstraint("tenant_id", "id"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="member")
    email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    verification_token: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True
    )
    verification_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, tenant_id={self.tenant_id}, email={self.email})>"
