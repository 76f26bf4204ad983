"""SQLAlchemy ORM model for the todos table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKeyConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TenantOwnedMixin, TimestampMixin


class TodoModel(Base, TenantOwnedMixin, TimestampMixin):
    """ORM model for todos table.

    Note: (tenant_id, user_id) references users(tenant_id, id) as a pair, so
    the database refuses a todo whose owner lives in another tenant.
    """

    __tablename__ = "todos"
    __table_args__ = (
        ForeignKeyConstraint(
            ["tenant_id", "user_id"],
            ["users.tenant_id", "users.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_todos_tenant_id_user_id_created_at",
            "tenant_id",
            "user_id",
            "created_at",
        ),
        Index(
            "ix_todos_tenant_id_is_public_created_at",
            "tenant_id",
            "is_public",
            "created_at",
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(26), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TodoModel(id={self.id}, tenant_id={self.tenant_id})>"
