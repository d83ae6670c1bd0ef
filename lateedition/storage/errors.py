"""Exceptions raised by the blob storage layer."""

from __future__ import annotations


class BlobStorageError(Exception):
    """A blob operation failed (network, permissions, malformed data)."""


class BlobNotFoundError(BlobStorageError):
    """The requested blob does not exist."""


class IndexConflictError(BlobStorageError):
    """The index kept changing underneath a read-modify-write.

    Raised after the configured number of attempts all observed a
    concurrent modification of the index document.
    """

    def __init__(self, collection: str, attempts: int) -> None:
        super().__init__(
            f"Index for '{collection}' changed concurrently on {attempts} attempts"
        )
        self.collection = collection
        self.attempts = attempts
