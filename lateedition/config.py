"""Application configuration with Pydantic Settings.

Settings are loaded from environment variables and .env files.

Examples:
    >>> from lateedition.config import get_settings
    >>> settings = get_settings()
    >>> settings.BLOB_BACKEND
    <BlobBackendType.LOCAL: 'local'>

Tests:
    - tests/unit/test_config.py
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lateedition.storage.config import BlobBackendType, StorageConfig


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        DATABASE_URL: Database connection string (SQLite or PostgreSQL)
        DB_ECHO: Log SQL statements
        DB_POOL_SIZE: PostgreSQL pool size
        DB_MAX_OVERFLOW: PostgreSQL connections allowed above the pool size
        ADMIN_PASSWORD: Admin login password, also the token signing secret
        BLOB_BACKEND: Which blob backend to use (local or http)
        BLOB_ROOT: Root directory for the local blob backend
        BLOB_API_URL: Base URL of the blob REST API
        BLOB_READ_WRITE_TOKEN: Bearer token for the blob REST API
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./lateedition.db",
        description="Database connection string",
    )
    DB_ECHO: bool = Field(
        default=False,
        description="Log every SQL statement",
    )
    DB_POOL_SIZE: int = Field(
        default=5,
        description="Persistent PostgreSQL connections",
        ge=1,
    )
    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Extra PostgreSQL connections allowed under load",
        ge=0,
    )

    # Auth
    ADMIN_PASSWORD: str | None = Field(
        default=None,
        description="Admin password and token signing secret",
    )

    # Blob storage
    BLOB_BACKEND: BlobBackendType = Field(
        default=BlobBackendType.LOCAL,
        description="Blob storage backend",
    )
    BLOB_ROOT: str = Field(
        default="./output/blobs",
        description="Root directory for local blob storage",
    )
    BLOB_API_URL: str = Field(
        default="https://blob.vercel-storage.com",
        description="Blob REST API base URL",
    )
    BLOB_READ_WRITE_TOKEN: str | None = Field(
        default=None,
        description="Blob REST API token",
    )
    BLOB_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for blob API calls",
        gt=0,
    )
    INDEX_WRITE_RETRIES: int = Field(
        default=3,
        description="Attempts at an index write before giving up on conflicts",
        ge=1,
        le=10,
    )

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=True,
        description="Enable debug mode",
    )
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["https://www.lateedition.org"],
        description="Allowed CORS origins outside debug mode",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {valid_prefixes}"
            )
        return v

    @model_validator(mode="after")
    def validate_blob_backend(self) -> "Settings":
        """The http backend cannot run without a token."""
        if self.BLOB_BACKEND == BlobBackendType.HTTP and not self.BLOB_READ_WRITE_TOKEN:
            raise ValueError("BLOB_READ_WRITE_TOKEN is required when BLOB_BACKEND=http")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.DATABASE_URL.startswith("sqlite")

    def get_storage_config(self) -> StorageConfig:
        """Project the blob settings into a StorageConfig."""
        return StorageConfig(
            backend=self.BLOB_BACKEND,
            root=self.BLOB_ROOT,
            api_url=self.BLOB_API_URL,
            token=self.BLOB_READ_WRITE_TOKEN,
            timeout_seconds=self.BLOB_TIMEOUT_SECONDS,
            index_write_retries=self.INDEX_WRITE_RETRIES,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
