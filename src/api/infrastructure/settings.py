"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    The application connects with a role that is subject to row-level
    security. The admin credential is only read by migrations and test
    seeding and is never handed to request-handling code.

    Environment variables:
        TODO_DB_HOST: Database host (default: localhost)
        TODO_DB_PORT: Database port (default: 5432)
        TODO_DB_DATABASE: Database name (default: todo)
        TODO_DB_USERNAME: Application role (default: todo_app)
        TODO_DB_PASSWORD: Application role password (required in production)
        TODO_DB_ADMIN_USERNAME: Migration owner role (default: todo)
        TODO_DB_ADMIN_PASSWORD: Migration owner password
        TODO_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        TODO_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="TODO_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="todo", description="Database name")
    username: str = Field(
        default="todo_app", description="Application role (no BYPASSRLS)"
    )
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Application role password",
    )
    admin_username: str = Field(
        default="todo", description="Migration owner role"
    )
    admin_password: SecretStr = Field(
        default=SecretStr(""),
        description="Migration owner password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Token issuance and credential settings.

    Environment variables:
        TODO_AUTH_JWT_SECRET: HMAC secret for signing tokens
        TODO_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        TODO_AUTH_ISSUER: Issuer claim (default: tenant-todo)
        TODO_AUTH_ACCESS_TOKEN_TTL_MINUTES: Access token lifetime (default: 15)
        TODO_AUTH_REFRESH_TOKEN_TTL_DAYS: Refresh token lifetime (default: 7)
        TODO_AUTH_VERIFICATION_TOKEN_TTL_HOURS: Email verification window (default: 24)
    """

    model_config = SettingsConfigDict(
        env_prefix="TODO_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr("dev-only-secret-change-me-in-production"),
        description="HMAC secret used to sign access and refresh tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    issuer: str = Field(default="tenant-todo", description="JWT issuer claim")
    access_token_ttl_minutes: int = Field(
        default=15,
        description="Access token lifetime in minutes",
        ge=1,
    )
    refresh_token_ttl_days: int = Field(
        default=7,
        description="Refresh token lifetime in days",
        ge=1,
    )
    verification_token_ttl_hours: int = Field(
        default=24,
        description="Email verification token lifetime in hours",
        ge=1,
    )

    @model_validator(mode="after")
    def validate_secret_length(self) -> "AuthSettings":
        """Reject short signing secrets."""
        if len(self.jwt_secret.get_secret_value()) < 32:
            raise ValueError("jwt_secret must be at least 32 characters long")
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="TODO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Tenant Todo API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Origins allowed to call the API from a browser",
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get auth settings."""
        return get_auth_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached auth settings."""
    return AuthSettings()
