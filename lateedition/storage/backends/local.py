"""Local filesystem blob backend using pathlib.

Blob URLs are ``file://`` URIs; query strings are ignored on read.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

from lateedition.storage.backends.base import BlobBackend, BlobRef
from lateedition.storage.errors import BlobNotFoundError, BlobStorageError


class LocalBlobBackend(BlobBackend):
    """Pathlib-based local filesystem blob backend."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, pathname: str) -> Path:
        path = (self.root / pathname).resolve()
        if not path.is_relative_to(self.root):
            raise BlobStorageError(f"Pathname escapes blob root: {pathname}")
        return path

    def _path_from_url(self, url: str) -> Path:
        parts = urlsplit(url)
        if parts.scheme != "file":
            raise BlobStorageError(f"Not a local blob URL: {url}")
        path = Path(url2pathname(unquote(parts.path))).resolve()
        if not path.is_relative_to(self.root):
            raise BlobStorageError(f"URL outside blob root: {url}")
        return path

    def _ref(self, path: Path) -> BlobRef:
        return BlobRef(
            pathname=path.relative_to(self.root).as_posix(),
            url=path.as_uri(),
        )

    async def put(
        self,
        pathname: str,
        data: bytes,
        *,
        overwrite: bool = True,
        content_type: str = "application/json",
    ) -> BlobRef:
        """Write a blob to a local file."""
        p = self._resolve(pathname)
        if p.exists() and not overwrite:
            raise BlobStorageError(f"Blob already exists: {pathname}")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
        except OSError as e:
            raise BlobStorageError(f"Failed to write {pathname}: {e}") from e
        return self._ref(p)

    async def list(self, prefix: str) -> list[BlobRef]:
        """List local files whose relative path starts with prefix."""
        if not self.root.exists():
            return []
        refs = []
        for p in sorted(self.root.rglob("*")):
            if not p.is_file():
                continue
            ref = self._ref(p)
            if ref.pathname.startswith(prefix):
                refs.append(ref)
        return refs

    async def delete(self, url: str) -> None:
        """Delete a local file if it exists."""
        p = self._path_from_url(url)
        try:
            p.unlink(missing_ok=True)
        except OSError as e:
            raise BlobStorageError(f"Failed to delete {url}: {e}") from e

    async def fetch(self, url: str) -> bytes:
        """Read a local file."""
        p = self._path_from_url(url)
        try:
            return p.read_bytes()
        except FileNotFoundError as e:
            raise BlobNotFoundError(f"No blob at {url}") from e
        except OSError as e:
            raise BlobStorageError(f"Failed to read {url}: {e}") from e
