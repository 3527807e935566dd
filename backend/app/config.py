"""
Postboard Backend: Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file),
       validates types and ranges, and exposes a cached `Settings` object.
Who:   The application factory, the entry point, and Alembic.
When:  Validated once, before the server starts listening.

Required variables:
    DATABASE_URL   SQLAlchemy async URL, e.g. postgresql+asyncpg://user:pw@host/db
    ENVIRONMENT    development | production

Missing or malformed values raise ConfigurationError from load_settings(),
which the entry point treats as fatal.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from app.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Only DATABASE_URL and ENVIRONMENT are required; everything else has a
    default that works for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # DATABASE_URL and database_url both work
        extra="ignore",
    )

    # ── Database ──────────────────────────────────────────────────────────
    database_url: str = Field(description="Async SQLAlchemy connection URL")

    # Bounded pool: at most db_pool_size persistent connections, no overflow
    db_pool_size: int = Field(default=15, ge=1, le=100)

    # Seconds a single driver command may sit idle before the socket is dropped
    db_socket_timeout: float = Field(default=45.0, gt=0)

    # ── Deployment ────────────────────────────────────────────────────────
    environment: Literal["development", "production"]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)
    api_prefix: str = Field(default="/api")

    # Comma-separated origins, "*" allows any origin
    cors_origins: str = Field(default="*")

    log_level: str = Field(default="INFO")

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v):
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        try:
            make_url(v)
        except ArgumentError as exc:
            raise ValueError(f"could not parse database URL: {exc}") from exc
        return v

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("must start with '/'")
        # "/" mounts the routers at the root
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def load_settings() -> Settings:
    """
    Build Settings from the environment, failing fast on bad configuration.

    Raises:
        ConfigurationError: listing every missing or invalid variable.
    """
    try:
        return Settings()
    except ValidationError as exc:
        problems = []
        for error in exc.errors():
            name = ".".join(str(part) for part in error["loc"]).upper() or "SETTINGS"
            problems.append(f"{name}: {error['msg']}")
        raise ConfigurationError(problems) from exc


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings; parsed and validated on first use only."""
    return load_settings()
