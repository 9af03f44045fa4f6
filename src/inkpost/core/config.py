"""Configuration management for Inkpost.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once at
application startup and passed to the components that need it.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from inkpost.core.durations import parse_duration

DEFAULT_ACCESS_SECRET = "dev-access-secret-change-me-use-openssl-rand-hex-32"
DEFAULT_REFRESH_SECRET = "dev-refresh-secret-change-me-use-openssl-rand-hex-32"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INKPOST_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Inkpost"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    frontend_url: str = "http://localhost:3001"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/inkpost.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Token Settings
    access_token_secret: str = Field(
        default=DEFAULT_ACCESS_SECRET,
        min_length=32,
        description="Secret used to sign access tokens",
    )
    refresh_token_secret: str = Field(
        default=DEFAULT_REFRESH_SECRET,
        min_length=32,
        description="Secret used to sign refresh tokens (must differ from the access secret)",
    )
    access_token_expires_in: str = "24h"
    refresh_token_expires_in: str = "30d"
    jwt_issuer: str = "inkpost-api"
    jwt_audience: str = "inkpost-app"
    refresh_token_store_days: int = 30
    password_reset_expire_minutes: int = 60
    email_verification_expire_hours: int = 24
    used_token_retention_days: int = 7
    token_cleanup_interval_minutes: int = 0  # 0 disables the background sweep

    # Password Hashing (Argon2id)
    password_hash_time_cost: int = 3
    password_hash_memory_cost: int = 65536  # KiB
    password_hash_parallelism: int = 4

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:3001"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Email Settings
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    smtp_timeout: int = 10
    email_from_address: str = "no-reply@inkpost.local"
    email_from_name: str = "Inkpost"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("access_token_expires_in", "refresh_token_expires_in")
    @classmethod
    def validate_duration(cls, v: str) -> str:
        """Reject token lifetimes that cannot be parsed."""
        parse_duration(v)
        return v

    @model_validator(mode="after")
    def validate_token_secrets(self) -> "Settings":
        """Validate that the two signing secrets are distinct and not defaults in production."""
        if self.access_token_secret == self.refresh_token_secret:
            raise ValueError("access_token_secret and refresh_token_secret must be different")
        if self.is_production and (
            self.access_token_secret == DEFAULT_ACCESS_SECRET
            or self.refresh_token_secret == DEFAULT_REFRESH_SECRET
        ):
            raise ValueError("Default token secrets cannot be used in production")
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def access_token_lifetime(self) -> timedelta:
        return parse_duration(self.access_token_expires_in)

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return parse_duration(self.refresh_token_expires_in)

    @property
    def refresh_token_store_lifetime(self) -> timedelta:
        return timedelta(days=self.refresh_token_store_days)

    @property
    def password_reset_lifetime(self) -> timedelta:
        return timedelta(minutes=self.password_reset_expire_minutes)

    @property
    def email_verification_lifetime(self) -> timedelta:
        return timedelta(hours=self.email_verification_expire_hours)

    @property
    def used_token_retention(self) -> timedelta:
        return timedelta(days=self.used_token_retention_days)

    @property
    def database_url_sync(self) -> str:
        """Get synchronous database URL for migrations."""
        url = self.database_url
        if url.startswith("sqlite+aiosqlite"):
            return url.replace("sqlite+aiosqlite", "sqlite")
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql")
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once per process. Components receive the instance
    through their constructors instead of calling this function themselves.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
