"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.value_objects import CurrentUser
from iam.domain.value_objects import TenantId, UserId, UserRole


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
        admin_username="testadmin",
        admin_password="adminpass",
    )


@pytest.fixture
def mock_session() -> MagicMock:
    """Provide a mocked AsyncSession whose begin() is an async context manager.

    ``execute`` is awaited by tenant_transaction to bind the tenant, so tests
    can inspect the binding statement through it.
    """
    session = MagicMock(spec=AsyncSession)

    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=transaction)

    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.flush = AsyncMock()
    return session


@pytest.fixture
def tenant_id() -> TenantId:
    """Tenant of the default caller."""
    return TenantId.generate()


@pytest.fixture
def current_user(tenant_id: TenantId) -> CurrentUser:
    """Authenticated caller built from access token claims."""
    return CurrentUser(
        user_id=UserId.generate(),
        tenant_id=tenant_id,
        email="alice@example.com",
        role=UserRole.MEMBER,
    )
