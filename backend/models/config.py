import os
import sys
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    For local development, load `.env` automatically so `SECRET_KEY` can be
    provided from `backend/.env`. **SECRET_KEY remains required** and must be
    set in production via environment variables.

    Do NOT auto-load `.env` when running under pytest or in CI, so tests that
    validate missing secrets keep failing fast.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'staging', 'production' or 'test'",
    )

    DATABASE_URL: str = "sqlite:///./data/pawbuddy.db"

    # Token issuing
    SECRET_KEY: str = Field(
        ...,  # Required, no default
        description="JWT secret key - must be set via SECRET_KEY environment variable",
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=24 * 60,
        description="Bearer token lifetime in minutes (one day)",
    )
    JWT_ISSUER: str = "admin-panel-api"
    JWT_AUDIENCE: str = "admin-panel-client"

    # Password hashing and account lockout
    BCRYPT_ROUNDS: int = Field(
        default=10,
        ge=4,
        le=31,
        description="bcrypt work factor (log2 of the number of rounds)",
    )
    MAX_LOGIN_ATTEMPTS: int = Field(
        default=5,
        ge=1,
        description="Consecutive failed logins before the account is locked",
    )
    LOCK_DURATION_MINUTES: int = Field(
        default=120,
        ge=1,
        description="How long a locked account rejects authentication",
    )

    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Optional bootstrap admin (used by init_db.py)
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_EMAIL: str | None = Field(
        default=None,
        description="Bootstrap admin email; init_db.py skips admin creation when unset",
    )
    ADMIN_PASSWORD: str | None = Field(
        default=None,
        description="Bootstrap admin password; must be set together with ADMIN_EMAIL",
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(
        default=5,
        description="Number of persistent connections in pool",
    )
    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Extra connections when pool exhausted",
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        description="Seconds to wait for connection from pool",
    )
    DB_POOL_RECYCLE: int = Field(
        default=1800,
        description="Recycle connections after N seconds (30 min default)",
    )

    # Safety: avoid creating DB schema automatically unless explicitly enabled.
    AUTO_CREATE_DB: bool = Field(
        default=False,
        description="When true (development only), call Base.metadata.create_all on startup",
    )

    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    # Uploads
    UPLOAD_DIR: str = Field(
        default="data/uploads",
        description="Root directory for uploaded images",
    )
    MAX_IMAGE_SIZE: int = Field(
        default=5 * 1024 * 1024,
        description="Size ceiling in bytes for single-image entities",
    )
    MAX_REPORT_PHOTO_SIZE: int = Field(
        default=10 * 1024 * 1024,
        description="Size ceiling in bytes for each incident report photo",
    )
    MAX_REPORT_PHOTOS: int = Field(
        default=5,
        description="Maximum number of photos per report upload",
    )

    # Pagination
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    # Rate limiting (slowapi syntax)
    RATE_LIMIT_DEFAULT: str = "10000/5minutes"
    RATE_LIMIT_LOGIN: str = "10/minute"
    RATE_LIMIT_REGISTER: str = "5/minute"

    SENTRY_DSN: str = Field(
        default="",
        description="Sentry DSN; error reporting is disabled when empty",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str) and not v.strip().startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Instantiating Settings() raises pydantic.ValidationError if SECRET_KEY isn't set.
settings = Settings()  # type: ignore[call-arg]


def get_settings() -> Settings:
    """Get the settings instance (for dependency injection)."""
    return settings
