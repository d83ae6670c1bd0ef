"""Storage service. Wires every content collection to one blob backend.

Examples:
    >>> from lateedition.storage.service import StorageService
    >>> service = StorageService.from_config(config)
    >>> post = await service.posts.create({"title": "Hello", "slug": "hello", "content": "<p>Hi</p>"})
    >>> await service.posts.update(post.id, {"title": "Hello v2"})
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic

from lateedition.clock import Clock, to_epoch_ms, to_iso, utc_now
from lateedition.schemas import (
    Album,
    AlbumMeta,
    Event,
    EventMeta,
    LookbookData,
    MusicData,
    Post,
    PostMeta,
    StaffMember,
    StaffMemberMeta,
)
from lateedition.storage.aggregate import AggregateDocument
from lateedition.storage.backends.base import BlobBackend
from lateedition.storage.backends.http import HttpBlobBackend
from lateedition.storage.backends.local import LocalBlobBackend
from lateedition.storage.config import BlobBackendType, StorageConfig
from lateedition.storage.errors import BlobStorageError
from lateedition.storage.naming import generate_id
from lateedition.storage.store import DocumentStore, EntityT, MetaT

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def newest_first(entries: list[Any]) -> list[Any]:
    """Sort index entries by ``created_at`` descending."""
    return sorted(entries, key=lambda e: e.created_at, reverse=True)


def by_order(entries: list[Any]) -> list[Any]:
    """Sort index entries by ``order`` ascending."""
    return sorted(entries, key=lambda e: e.order)


class ContentService(Generic[EntityT, MetaT]):
    """Entity lifecycle on top of a DocumentStore.

    Assigns ids and timestamps on create, keeps ``id`` and ``created_at``
    fixed on update, and applies the collection's listing order.

    Attributes:
        store: Underlying document store.
        clock: Time source for timestamps.
    """

    def __init__(
        self,
        store: DocumentStore[EntityT, MetaT],
        *,
        clock: Clock = utc_now,
        sort: Callable[[list[MetaT]], list[MetaT]] = newest_first,
    ) -> None:
        self.store = store
        self.clock = clock
        self._sort = sort

    async def list(self) -> list[MetaT]:
        """Index entries in display order."""
        return self._sort(await self.store.get_index())

    async def get(self, entity_id: str) -> EntityT | None:
        return await self.store.get_entity(entity_id)

    async def get_by_slug(self, slug: str) -> EntityT | None:
        return await self.store.get_entity_by_slug(slug)

    async def create(self, fields: dict[str, Any]) -> EntityT:
        """Create an entity from caller-supplied fields.

        Args:
            fields: Entity fields by name; ``id`` and timestamps are ignored.

        Returns:
            The stored entity with ``created_at == updated_at``.
        """
        now = self.clock()
        stamp = to_iso(now)
        data = {k: v for k, v in fields.items() if k not in IMMUTABLE_FIELDS | {"updated_at"}}
        data.update(id=generate_id(to_epoch_ms(now)), created_at=stamp, updated_at=stamp)
        entity = self.store.entity_model.model_validate(data)
        return await self.store.create(entity)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> EntityT | None:
        """Apply changes to an existing entity.

        Fields absent from ``changes`` keep their current value.

        Returns:
            The updated entity, or None if it does not exist.

        Raises:
            BlobStorageError: The existing entity could not be read.
        """
        result = await self.store.lookup_entity(entity_id)
        if result.is_error:
            raise BlobStorageError(
                f"Cannot update {self.store.collection}/{entity_id}: {result.error}"
            ) from result.error
        existing = result.value
        if existing is None:
            return None

        data = existing.model_dump()
        data.update({k: v for k, v in changes.items() if k not in IMMUTABLE_FIELDS})
        data["updated_at"] = max(to_iso(self.clock()), existing.updated_at)  # type: ignore[attr-defined]
        updated = self.store.entity_model.model_validate(data)
        return await self.store.update(updated)

    async def delete(self, entity_id: str) -> bool:
        return await self.store.remove(entity_id)


class StorageService:
    """All content collections over one blob backend.

    Attributes:
        config: Storage configuration.
        backend: Blob backend for I/O.
    """

    def __init__(
        self,
        config: StorageConfig,
        backend: BlobBackend | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config
        self.backend = backend or LocalBlobBackend(config.root)
        retries = config.index_write_retries

        self.posts: ContentService[Post, PostMeta] = ContentService(
            DocumentStore(self.backend, "posts", Post, PostMeta, index_write_retries=retries),
            clock=clock,
        )
        self.events: ContentService[Event, EventMeta] = ContentService(
            DocumentStore(self.backend, "events", Event, EventMeta, index_write_retries=retries),
            clock=clock,
        )
        self.albums: ContentService[Album, AlbumMeta] = ContentService(
            DocumentStore(self.backend, "albums", Album, AlbumMeta, index_write_retries=retries),
            clock=clock,
        )
        self.staff: ContentService[StaffMember, StaffMemberMeta] = ContentService(
            DocumentStore(
                self.backend, "staff", StaffMember, StaffMemberMeta, index_write_retries=retries
            ),
            clock=clock,
            sort=by_order,
        )
        self.lookbook = AggregateDocument(self.backend, "lookbook", LookbookData)
        self.music = AggregateDocument(self.backend, "music", MusicData)

    @classmethod
    def from_config(cls, config: StorageConfig) -> "StorageService":
        """Create a StorageService with the backend named in config."""
        if config.backend == BlobBackendType.HTTP:
            if not config.token:
                raise ValueError("The http blob backend requires a token")
            backend: BlobBackend = HttpBlobBackend(
                config.api_url, config.token, timeout=config.timeout_seconds
            )
        else:
            backend = LocalBlobBackend(config.root)
        logger.info(f"Blob storage backend: {config.backend.value}")
        return cls(config=config, backend=backend)

    async def check_health(self) -> bool:
        """Check that the backend answers a listing."""
        try:
            await self.backend.list("posts/index")
            return True
        except BlobStorageError as e:
            logger.error(f"Blob storage health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.backend.aclose()
