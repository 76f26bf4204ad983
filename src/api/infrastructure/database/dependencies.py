"""Database dependency injection for FastAPI.

Provides the pooled application engine and a per-request session. Only
the application role is reachable from here; the admin engine is never
exposed as a dependency.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_app_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_engine: AsyncEngine | None = None

# Module-level sessionmaker instance (created with the engine)
_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """Get the application database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the sessionmaker for efficient session creation.

    Returns:
        Configured async engine for the application role
    """
    global _engine, _sessionmaker
    if _engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _engine is None:
                settings = get_database_settings()
                _engine = create_app_engine(settings)
                _sessionmaker = async_sessionmaker(
                    _engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_max_connections,
                )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker bound to the application engine."""
    get_engine()
    assert _sessionmaker is not None
    return _sessionmaker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for the current request (FastAPI dependency).

    The session is configured to NOT auto-commit. Tenant-scoped work must
    be wrapped in ``tenant_transaction(session, ...)``, which opens the
    transaction and binds the tenant before any query runs.

    Yields:
        AsyncSession for database operations
    """
    async with get_session_factory()() as session:
        yield session


async def close_database_connections() -> None:
    """Close all database engine connections.

    Should be called on application shutdown to properly cleanup connections.
    Also resets the sessionmaker to allow reinitialization.
    """
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _probe.pool_closed()
        _engine = None
        _sessionmaker = None
