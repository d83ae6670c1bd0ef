"""Abstract base class for blob backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class BlobRef(BaseModel):
    """A stored blob as reported by the backend."""

    pathname: str
    url: str


class BlobBackend(ABC):
    """Abstract blob backend.

    Blobs are addressed by a logical pathname on write and by the URL the
    backend hands back on read and delete. Implementations raise
    ``BlobStorageError`` on failure and ``BlobNotFoundError`` when
    fetching a URL that holds nothing.
    """

    @abstractmethod
    async def put(
        self,
        pathname: str,
        data: bytes,
        *,
        overwrite: bool = True,
        content_type: str = "application/json",
    ) -> BlobRef:
        """Write a blob at a fixed pathname.

        Args:
            pathname: Logical path, e.g. ``posts/index.json``.
            data: Body bytes.
            overwrite: Allow replacing an existing blob at the same path.
            content_type: MIME type recorded with the blob.

        Returns:
            Reference to the stored blob.
        """

    @abstractmethod
    async def list(self, prefix: str) -> list[BlobRef]:
        """List blobs whose pathname starts with ``prefix``.

        Args:
            prefix: Pathname prefix.

        Returns:
            All matching blobs.
        """

    @abstractmethod
    async def delete(self, url: str) -> None:
        """Delete the blob at ``url``. Deleting a missing blob is a no-op."""

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """Download a blob body.

        Args:
            url: Blob URL, possibly carrying cache-busting query parameters.

        Returns:
            Body bytes.
        """

    async def aclose(self) -> None:
        """Release any held resources."""
