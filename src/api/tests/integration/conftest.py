"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance migrated to head
(``alembic upgrade head``). The admin credential seeds and cleans tables;
everything under test runs as the application role, which is subject to
row-level security.

Run with ``pytest -m integration``.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from iam.domain.value_objects import TenantId, UserId
from infrastructure.database.engines import create_admin_engine, create_app_engine
from infrastructure.settings import DatabaseSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        TODO_DB_HOST, TODO_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("TODO_DB_HOST", "localhost"),
        port=int(os.getenv("TODO_DB_PORT", "5432")),
        database=os.getenv("TODO_DB_DATABASE", "todo"),
        username=os.getenv("TODO_DB_USERNAME", "todo_app"),
        password=SecretStr(os.getenv("TODO_DB_PASSWORD", "todo_app_dev_password")),
        admin_username=os.getenv("TODO_DB_ADMIN_USERNAME", "todo"),
        admin_password=SecretStr(
            os.getenv("TODO_DB_ADMIN_PASSWORD", "todo_dev_password")
        ),
    )


@pytest_asyncio.fixture
async def admin_engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine for the migration role, which bypasses row-level security."""
    engine = create_admin_engine(integration_db_settings)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def app_engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine for the application role the API connects with."""
    engine = create_app_engine(integration_db_settings)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(app_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(app_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def app_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an application-role session for integration tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def clean_database(admin_engine: AsyncEngine) -> AsyncGenerator[None, None]:
    """Empty all tenant data before and after each test."""
    truncate = text("TRUNCATE todos, users, tenants CASCADE")

    async with admin_engine.begin() as conn:
        await conn.execute(truncate)

    yield

    async with admin_engine.begin() as conn:
        await conn.execute(truncate)


SeedTenant = Callable[[str], Awaitable[TenantId]]
SeedUser = Callable[[TenantId, str], Awaitable[UserId]]


@pytest.fixture
def seed_tenant(admin_engine: AsyncEngine, clean_database: None) -> SeedTenant:
    """Insert a tenant with the admin role and return its ID."""

    async def _seed(slug: str) -> TenantId:
        tenant_id = TenantId.generate()
        async with admin_engine.begin() as conn:
            await conn.execute(
                text(
                    "INSERT INTO tenants (id, name, slug, created_at, updated_at) "
                    "VALUES (:id, :slug, :slug, now(), now())"
                ),
                {"id": tenant_id.value, "slug": slug},
            )
        return tenant_id

    return _seed


@pytest.fixture
def seed_user(admin_engine: AsyncEngine, clean_database: None) -> SeedUser:
    """Insert a user into a tenant with the admin role and return its ID."""

    async def _seed(tenant_id: TenantId, email: str) -> UserId:
        user_id = UserId.generate()
        async with admin_engine.begin() as conn:
            await conn.execute(
                text(
                    "INSERT INTO users (id, tenant_id, email, password_hash, name, "
                    "role, email_verified, created_at, updated_at) "
                    "VALUES (:id, :tenant_id, :email, 'x', :email, 'member', "
                    "false, now(), now())"
                ),
                {"id": user_id.value, "tenant_id": tenant_id.value, "email": email},
            )
        return user_id

    return _seed
