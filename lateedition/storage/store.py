"""Blob-backed document store with a denormalized list index.

Each collection keeps one JSON blob per entity plus one index blob holding a
flattened projection of every entity, so listings need a single read.

Examples:
    >>> store = DocumentStore(backend, "posts", Post, PostMeta)
    >>> await store.create(post)
    >>> await store.get_index()
    [PostMeta(id='lx3k9a2b4c6d', ...)]

Writes to the entity and to the index are two separate blob writes. Index
writes are serialized per store instance and re-read the index digest just
before writing, retrying the mutation on a fresh copy when it changed. The
blob API has no conditional write, so two processes can still race inside
the gap between that re-read and the put.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from lateedition.schemas.base import Document
from lateedition.storage.backends.base import BlobBackend, BlobRef
from lateedition.storage.errors import BlobNotFoundError, BlobStorageError, IndexConflictError
from lateedition.storage.naming import (
    cache_busted_url,
    entity_path,
    entity_prefix,
    index_path,
    index_prefix,
)
from lateedition.storage.results import ReadResult

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=Document)
MetaT = TypeVar("MetaT", bound=Document)

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class IndexSnapshot(Generic[MetaT]):
    """Index entries together with the digest of the bytes they came from."""

    entries: list[MetaT]
    digest: str | None


def _digest(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


async def find_blob(backend: BlobBackend, prefix: str, pathname: str) -> BlobRef | None:
    """List by prefix and return the blob whose pathname matches exactly."""
    for ref in await backend.list(prefix):
        if ref.pathname == pathname:
            return ref
    return None


class DocumentStore(Generic[EntityT, MetaT]):
    """Generic entity + index store for one collection.

    Attributes:
        backend: Blob backend for I/O.
        collection: Collection name, used as the path prefix.
        entity_model: Pydantic model of the full entity.
        meta_model: Pydantic model of the index entry.
    """

    def __init__(
        self,
        backend: BlobBackend,
        collection: str,
        entity_model: type[EntityT],
        meta_model: type[MetaT],
        *,
        index_write_retries: int = 3,
    ) -> None:
        self.backend = backend
        self.collection = collection
        self.entity_model = entity_model
        self.meta_model = meta_model
        self.index_write_retries = index_write_retries
        self._index_adapter = TypeAdapter(list[meta_model])  # type: ignore[valid-type]
        self._index_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def to_meta(self, entity: EntityT) -> MetaT:
        """Project a full entity onto its index entry."""
        return self.meta_model.model_validate(entity.model_dump())

    # ------------------------------------------------------------------
    # Index reads
    # ------------------------------------------------------------------

    async def _read_index(self) -> IndexSnapshot[MetaT]:
        ref = await find_blob(self.backend, index_prefix(self.collection), index_path(self.collection))
        if ref is None:
            return IndexSnapshot(entries=[], digest=None)
        try:
            data = await self.backend.fetch(cache_busted_url(ref.url))
        except BlobNotFoundError:
            return IndexSnapshot(entries=[], digest=None)
        try:
            entries = self._index_adapter.validate_json(data)
        except ValidationError as e:
            raise BlobStorageError(f"Malformed index for '{self.collection}': {e}") from e
        return IndexSnapshot(entries=entries, digest=_digest(data))

    async def lookup_index(self) -> ReadResult[list[MetaT]]:
        """Read the index, distinguishing absence from storage failure."""
        try:
            snapshot = await self._read_index()
        except BlobStorageError as e:
            return ReadResult.failed(e)
        if snapshot.digest is None:
            return ReadResult.not_found()
        return ReadResult.found(snapshot.entries)

    async def get_index(self) -> list[MetaT]:
        """Read the index.

        Returns:
            Index entries in on-disk order; empty when the index does not
            exist or cannot be read. Read failures are logged, not raised.
        """
        result = await self.lookup_index()
        if result.is_error:
            logger.warning(f"Index read failed for '{self.collection}': {result.error}")
        return result.unwrap_or([])

    # ------------------------------------------------------------------
    # Index writes
    # ------------------------------------------------------------------

    async def save_index(self, entries: list[MetaT]) -> None:
        """Overwrite the index blob with ``entries``."""
        data = self._index_adapter.dump_json(entries, by_alias=True)
        await self.backend.put(
            index_path(self.collection),
            data,
            overwrite=True,
            content_type=JSON_CONTENT_TYPE,
        )

    async def _current_index_digest(self) -> str | None:
        ref = await find_blob(self.backend, index_prefix(self.collection), index_path(self.collection))
        if ref is None:
            return None
        try:
            return _digest(await self.backend.fetch(cache_busted_url(ref.url)))
        except BlobNotFoundError:
            return None

    async def mutate_index(
        self,
        mutate: Callable[[list[MetaT]], list[MetaT] | None],
    ) -> list[MetaT]:
        """Read-modify-write the index.

        ``mutate`` receives a copy of the current entries and returns the new
        list, or ``None`` when nothing needs writing. A read failure raises
        instead of mutating an empty list, so an unreadable index is never
        overwritten with a partial one.

        Args:
            mutate: Pure function from current entries to new entries.

        Returns:
            The entries now stored.

        Raises:
            BlobStorageError: The index could not be read or written.
            IndexConflictError: The index changed on every attempt.
        """
        async with self._index_lock:
            for attempt in range(1, self.index_write_retries + 1):
                snapshot = await self._read_index()
                updated = mutate(list(snapshot.entries))
                if updated is None:
                    return snapshot.entries
                if await self._current_index_digest() != snapshot.digest:
                    logger.warning(
                        f"Index for '{self.collection}' changed during update "
                        f"(attempt {attempt}/{self.index_write_retries})"
                    )
                    continue
                await self.save_index(updated)
                return updated
        raise IndexConflictError(self.collection, self.index_write_retries)

    # ------------------------------------------------------------------
    # Entity reads
    # ------------------------------------------------------------------

    async def lookup_entity(self, entity_id: str) -> ReadResult[EntityT]:
        """Read one entity, distinguishing absence from storage failure."""
        try:
            ref = await find_blob(
                self.backend,
                entity_prefix(self.collection, entity_id),
                entity_path(self.collection, entity_id),
            )
            if ref is None:
                return ReadResult.not_found()
            data = await self.backend.fetch(cache_busted_url(ref.url))
            return ReadResult.found(self.entity_model.model_validate_json(data))
        except BlobNotFoundError:
            return ReadResult.not_found()
        except (BlobStorageError, ValidationError) as e:
            return ReadResult.failed(e)

    async def get_entity(self, entity_id: str) -> EntityT | None:
        """Read one entity; ``None`` when absent or unreadable."""
        result = await self.lookup_entity(entity_id)
        if result.is_error:
            logger.warning(
                f"Read of {self.collection}/{entity_id} failed: {result.error}"
            )
        return result.unwrap_or(None)

    async def get_entity_by_slug(self, slug: str) -> EntityT | None:
        """Find an entity by slug.

        Scans the index in on-disk order; the first entry with an exactly
        matching slug wins when several share it.
        """
        for entry in await self.get_index():
            if getattr(entry, "slug", None) == slug:
                return await self.get_entity(entry.id)  # type: ignore[attr-defined]
        return None

    # ------------------------------------------------------------------
    # Entity writes
    # ------------------------------------------------------------------

    async def save_entity(self, entity: EntityT) -> None:
        """Write (or overwrite) one entity blob."""
        await self.backend.put(
            entity_path(self.collection, entity.id),  # type: ignore[attr-defined]
            entity.to_json_bytes(),
            overwrite=True,
            content_type=JSON_CONTENT_TYPE,
        )

    async def delete_entity(self, entity_id: str) -> bool:
        """Delete one entity blob.

        Returns:
            True if a blob was found and deleted; False if none existed.
        """
        ref = await find_blob(
            self.backend,
            entity_prefix(self.collection, entity_id),
            entity_path(self.collection, entity_id),
        )
        if ref is None:
            return False
        await self.backend.delete(ref.url)
        return True

    # ------------------------------------------------------------------
    # Entity + index
    # ------------------------------------------------------------------

    async def create(self, entity: EntityT) -> EntityT:
        """Write a new entity and append its index entry."""
        await self.save_entity(entity)
        meta = self.to_meta(entity)
        await self.mutate_index(lambda entries: entries + [meta])
        logger.info(f"Created {self.collection}/{meta.id}")  # type: ignore[attr-defined]
        return entity

    async def update(self, entity: EntityT) -> EntityT:
        """Rewrite an entity in place and replace its index entry by id."""
        await self.save_entity(entity)
        meta = self.to_meta(entity)
        entity_id = entity.id  # type: ignore[attr-defined]
        await self.mutate_index(
            lambda entries: [meta if e.id == entity_id else e for e in entries]  # type: ignore[attr-defined]
        )
        logger.info(f"Updated {self.collection}/{entity_id}")
        return entity

    async def remove(self, entity_id: str) -> bool:
        """Delete an entity and drop its index entry.

        The index is only rewritten when it actually shrank.

        Returns:
            True if the entity blob existed.
        """
        deleted = await self.delete_entity(entity_id)

        def _drop(entries: list[MetaT]) -> list[MetaT] | None:
            kept = [e for e in entries if e.id != entity_id]  # type: ignore[attr-defined]
            return kept if len(kept) < len(entries) else None

        await self.mutate_index(_drop)
        logger.info(f"Removed {self.collection}/{entity_id} (blob existed: {deleted})")
        return deleted
