"""create todos table

Revision ID: c41f7e0a9d56
Revises: 8d2a6b5c1e93
Create Date: 2026-10-12 09:31:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "c41f7e0a9d56"
down_revision: Union[str, Sequence[str], None] = "8d2a6b5c1e93"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "todos",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("tenant_id", sa.String(length=26), nullable=False),
        sa.Column("user_id", sa.String(length=26), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "completed", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "is_public", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_todos"),
        sa.ForeignKeyConstraint(
            ["tenant_id"],
            ["tenants.id"],
            name="fk_todos_tenant_id_tenants",
            ondelete="RESTRICT",
        ),
        # The owner must be a user of the same tenant
        sa.ForeignKeyConstraint(
            ["tenant_id", "user_id"],
            ["users.tenant_id", "users.id"],
            name="fk_todos_tenant_id_user_id_users",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_todos_tenant_id", "todos", ["tenant_id"])
    op.create_index(
        "ix_todos_tenant_id_user_id_created_at",
        "todos",
        ["tenant_id", "user_id", "created_at"],
    )
    op.create_index(
        "ix_todos_tenant_id_is_public_created_at",
        "todos",
        ["tenant_id", "is_public", "created_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_todos_tenant_id_is_public_created_at", table_name="todos")
    op.drop_index("ix_todos_tenant_id_user_id_created_at", table_name="todos")
    op.drop_index("ix_todos_tenant_id", table_name="todos")
    op.drop_table("todos")
