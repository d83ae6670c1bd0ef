"""Blob backends for document I/O."""

from lateedition.storage.backends.base import BlobBackend, BlobRef
from lateedition.storage.backends.http import HttpBlobBackend
from lateedition.storage.backends.local import LocalBlobBackend

__all__ = ["BlobBackend", "BlobRef", "HttpBlobBackend", "LocalBlobBackend"]
