"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from iam.presentation import auth_router, users_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_engine,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultConnectionProbe, DefaultStartupProbe
from infrastructure.settings import get_database_settings, get_settings
from infrastructure.version import __version__
from todo.presentation.routes import router as todo_router

settings = get_settings()


@asynccontextmanager
async def todo_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Engine lifecycle (created lazily, disposed on shutdown)
    """
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()
    probe.application_started(app_name=settings.app_name, version=__version__)

    yield

    await close_database_connections()
    probe.application_stopped(app_name=settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant todo service with database-enforced tenant isolation",
    version=__version__,
    lifespan=todo_lifespan,
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(todo_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> dict:
    """Check database connection health.

    Runs a trivial query through the application role's pool. No tenant is
    bound, so no row of any protected table is visible here.
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db_settings = get_database_settings()
        DefaultConnectionProbe().connection_check_failed(
            host=db_settings.host, database=db_settings.database, error=e
        )
        return {"status": "error", "connected": False}

    return {"status": "ok", "connected": True}
