"""Alembic environment.

Migrations run with the admin credential from DatabaseSettings, never with
the application role.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from infrastructure.database.engines import build_async_url, create_admin_engine
from infrastructure.database.models import Base
from infrastructure.settings import get_database_settings

# Import all models so they register with Base.metadata
from iam.infrastructure.models import TenantModel, UserModel  # noqa: F401
from todo.infrastructure.models import TodoModel  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=build_async_url(get_database_settings(), admin=True),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations against the database through the async admin engine."""
    engine = create_admin_engine(get_database_settings())
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
