"""Storage configuration model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BlobBackendType(str, Enum):
    """Supported blob backends."""

    LOCAL = "local"
    HTTP = "http"


class StorageConfig(BaseModel):
    """Configuration for blob storage.

    Attributes:
        backend: Which blob backend to construct.
        root: Root directory for the local backend.
        api_url: Base URL for the http backend.
        token: Bearer token for the http backend.
        timeout_seconds: Per-request timeout for the http backend.
        index_write_retries: Attempts at an index write before raising a conflict.
    """

    backend: BlobBackendType = Field(default=BlobBackendType.LOCAL, description="Blob backend")
    root: str = Field(default="./output/blobs", description="Local blob storage root directory")
    api_url: str = Field(default="https://blob.vercel-storage.com", description="Blob API base URL")
    token: str | None = Field(default=None, description="Blob API token")
    timeout_seconds: float = Field(default=10.0, gt=0)
    index_write_retries: int = Field(default=3, ge=1)
