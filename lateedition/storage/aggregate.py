"""Single-blob aggregate documents (lookbook, music).

These collections have no per-item blobs: the whole collection lives in
``{collection}/index.json`` and every save rewrites it. Ordering is owned by
the document model, which re-sorts its lists whenever it is validated.
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from pydantic import ValidationError

from lateedition.schemas.base import Document
from lateedition.storage.backends.base import BlobBackend
from lateedition.storage.errors import BlobNotFoundError, BlobStorageError
from lateedition.storage.naming import cache_busted_url, index_path, index_prefix
from lateedition.storage.results import ReadResult
from lateedition.storage.store import JSON_CONTENT_TYPE, find_blob

logger = logging.getLogger(__name__)

DocT = TypeVar("DocT", bound=Document)


class AggregateDocument(Generic[DocT]):
    """One JSON document holding a whole collection."""

    def __init__(self, backend: BlobBackend, collection: str, model: type[DocT]) -> None:
        self.backend = backend
        self.collection = collection
        self.model = model

    async def lookup(self) -> ReadResult[DocT]:
        try:
            ref = await find_blob(
                self.backend, index_prefix(self.collection), index_path(self.collection)
            )
            if ref is None:
                return ReadResult.not_found()
            data = await self.backend.fetch(cache_busted_url(ref.url))
            return ReadResult.found(self.model.model_validate_json(data))
        except BlobNotFoundError:
            return ReadResult.not_found()
        except (BlobStorageError, ValidationError) as e:
            return ReadResult.failed(e)

    async def get(self) -> DocT:
        """Read the document; an empty one when absent or unreadable."""
        result = await self.lookup()
        if result.is_error:
            logger.warning(f"Read of {self.collection} failed: {result.error}")
        return result.unwrap_or(self.model())

    async def save(self, document: DocT) -> DocT:
        """Normalize and overwrite the document.

        Returns:
            The document as stored, with its lists re-sorted.
        """
        normalized = self.model.model_validate(document.model_dump())
        await self.backend.put(
            index_path(self.collection),
            normalized.to_json_bytes(),
            overwrite=True,
            content_type=JSON_CONTENT_TYPE,
        )
        logger.info(f"Saved {self.collection}")
        return normalized
