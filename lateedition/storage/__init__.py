"""Blob storage package.

Provides the generic document store (entity blobs plus a denormalized index
blob per collection), single-blob aggregate documents, and the backends they
run on.

Examples:
    >>> from lateedition.storage import StorageService, StorageConfig
    >>> service = StorageService.from_config(StorageConfig())
    >>> posts = await service.posts.list()
"""

from lateedition.storage.aggregate import AggregateDocument
from lateedition.storage.config import BlobBackendType, StorageConfig
from lateedition.storage.errors import BlobNotFoundError, BlobStorageError, IndexConflictError
from lateedition.storage.naming import generate_id, slugify
from lateedition.storage.results import ReadResult, ReadStatus
from lateedition.storage.service import ContentService, StorageService
from lateedition.storage.store import DocumentStore

__all__ = [
    "AggregateDocument",
    "BlobBackendType",
    "BlobNotFoundError",
    "BlobStorageError",
    "ContentService",
    "DocumentStore",
    "IndexConflictError",
    "ReadResult",
    "ReadStatus",
    "StorageConfig",
    "StorageService",
    "generate_id",
    "slugify",
]
