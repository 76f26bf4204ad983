"""enable row level security

Revision ID: e7b3d92f0c18
Revises: c41f7e0a9d56
Create Date: 2026-10-12 10:02:00.000000

Installs the tenant isolation policies on users and todos, creates the
application role the API connects with, and the narrow lookup function
email verification uses to find a token's tenant.

The role running migrations owns the tables and must be able to bypass
row-level security (superuser or BYPASSRLS). The application role can not.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from infrastructure.settings import get_database_settings

# revision identifiers, used by Alembic.
revision: str = "e7b3d92f0c18"
down_revision: Union[str, Sequence[str], None] = "c41f7e0a9d56"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TENANT_TABLES = ("users", "todos")

# current_setting(..., true) is NULL when nothing is bound, so no row matches
TENANT_PREDICATE = "tenant_id = current_setting('app.current_tenant_id', true)"


def _app_role_statement(
    bind: sa.Connection, template: str, role: str, password: str
) -> str:
    """Render a role statement with identifiers and literals quoted by PostgreSQL."""
    return bind.execute(
        sa.text(
            "SELECT format(CAST(:template AS text), CAST(:role AS text), "
            "CAST(:password AS text))"
        ),
        {"template": template, "role": role, "password": password},
    ).scalar_one()


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    settings = get_database_settings()
    role = settings.username
    password = settings.password.get_secret_value()

    role_exists = bind.execute(
        sa.text("SELECT 1 FROM pg_roles WHERE rolname = :role"), {"role": role}
    ).scalar()
    template = (
        "ALTER ROLE %I LOGIN NOSUPERUSER NOBYPASSRLS PASSWORD %L"
        if role_exists
        else "CREATE ROLE %I LOGIN NOSUPERUSER NOBYPASSRLS PASSWORD %L"
    )
    bind.exec_driver_sql(_app_role_statement(bind, template, role, password))

    quoted_role = bind.dialect.identifier_preparer.quote(role)

    for table in TENANT_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        # Without FORCE the table owner would skip the policy
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY tenant_isolation_{table} ON {table} "
            f"USING ({TENANT_PREDICATE}) "
            f"WITH CHECK ({TENANT_PREDICATE})"
        )

    op.execute(
        """
        CREATE FUNCTION app_find_verification_tenant(token text)
        RETURNS text
        LANGUAGE sql
        STABLE
        SECURITY DEFINER
        SET search_path = public, pg_temp
        AS $$
            SELECT tenant_id FROM users WHERE verification_token = token LIMIT 1
        $$
        """
    )
    op.execute("REVOKE ALL ON FUNCTION app_find_verification_tenant(text) FROM PUBLIC")

    op.execute(f"GRANT USAGE ON SCHEMA public TO {quoted_role}")
    op.execute(f"GRANT SELECT, INSERT ON tenants TO {quoted_role}")
    op.execute(
        f"GRANT SELECT, INSERT, UPDATE, DELETE ON users, todos TO {quoted_role}"
    )
    op.execute(
        f"GRANT EXECUTE ON FUNCTION app_find_verification_tenant(text) TO {quoted_role}"
    )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    quoted_role = bind.dialect.identifier_preparer.quote(
        get_database_settings().username
    )

    op.execute(
        f"REVOKE ALL ON FUNCTION app_find_verification_tenant(text) FROM {quoted_role}"
    )
    op.execute(f"REVOKE ALL ON users, todos, tenants FROM {quoted_role}")
    op.execute("DROP FUNCTION app_find_verification_tenant(text)")

    for table in reversed(TENANT_TABLES):
        op.execute(f"DROP POLICY tenant_isolation_{table} ON {table}")
        op.execute(f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
    # Roles are cluster-wide and are not dropped here
