"""Tests for lateedition.storage.store module.

Covers:
    - entity/index round trips and camelCase on disk
    - index consistency across create, update and remove
    - slug lookup order
    - three-state reads and error degradation
    - index writes: no clobbering on read failure, retry on concurrent change
"""

import json
import logging
from unittest.mock import AsyncMock

import pytest

from lateedition.schemas import Post, PostMeta
from lateedition.storage.backends.base import BlobBackend, BlobRef
from lateedition.storage.errors import BlobStorageError, IndexConflictError
from lateedition.storage.results import ReadStatus
from lateedition.storage.store import DocumentStore


def _post(post_id: str, slug: str = "hello", **overrides) -> Post:
    fields = dict(
        id=post_id,
        title="Hello",
        slug=slug,
        excerpt="First post",
        cover_image="",
        content="<p>Hi</p>",
        created_at="2026-02-09T12:00:00.000Z",
        updated_at="2026-02-09T12:00:00.000Z",
    )
    fields.update(overrides)
    return Post(**fields)


@pytest.fixture
def store(backend):
    return DocumentStore(backend, "posts", Post, PostMeta)


def _failing_backend(error: Exception) -> AsyncMock:
    backend = AsyncMock(spec=BlobBackend)
    backend.list.return_value = [
        BlobRef(pathname="posts/index.json", url="https://blob.example/posts/index.json"),
        BlobRef(pathname="posts/p1.json", url="https://blob.example/posts/p1.json"),
    ]
    backend.fetch.side_effect = error
    return backend


@pytest.mark.fast
class TestRoundTrip:
    """Entity and index round trips."""

    @pytest.mark.asyncio
    async def test_create_then_get(self, store):
        post = _post("p1")
        await store.create(post)
        assert await store.get_entity("p1") == post

    @pytest.mark.asyncio
    async def test_index_holds_projection(self, store):
        await store.create(_post("p1"))
        index = await store.get_index()
        assert index == [PostMeta(**_post("p1").model_dump())]
        assert not hasattr(index[0], "content")

    @pytest.mark.asyncio
    async def test_camel_case_on_disk(self, store, blob_root):
        await store.create(_post("p1", cover_image="/img/a.jpg"))

        entity = json.loads((blob_root / "posts" / "p1.json").read_text())
        assert entity["coverImage"] == "/img/a.jpg"
        assert entity["createdAt"] == "2026-02-09T12:00:00.000Z"

        index = json.loads((blob_root / "posts" / "index.json").read_text())
        assert set(index[0]) == {
            "id", "title", "slug", "excerpt", "coverImage", "createdAt", "updatedAt",
        }

    @pytest.mark.asyncio
    async def test_missing_collection_is_empty(self, store):
        assert await store.get_index() == []
        assert await store.get_entity("nope") is None


@pytest.mark.fast
class TestIndexConsistency:
    """The index mirrors the set of entity blobs."""

    @pytest.mark.asyncio
    async def test_create_appends(self, store):
        await store.create(_post("p1", slug="one"))
        await store.create(_post("p2", slug="two"))
        assert [e.id for e in await store.get_index()] == ["p1", "p2"]

    @pytest.mark.asyncio
    async def test_update_replaces_entry(self, store):
        await store.create(_post("p1", slug="one"))
        await store.create(_post("p2", slug="two"))

        await store.update(_post("p1", slug="one", title="Hello v2"))

        index = await store.get_index()
        assert [e.id for e in index] == ["p1", "p2"]
        assert index[0].title == "Hello v2"
        assert (await store.get_entity("p1")).title == "Hello v2"

    @pytest.mark.asyncio
    async def test_remove_deletes_blob_and_entry(self, store, blob_root):
        await store.create(_post("p1", slug="one"))
        await store.create(_post("p2", slug="two"))

        assert await store.remove("p1") is True

        assert not (blob_root / "posts" / "p1.json").exists()
        assert [e.id for e in await store.get_index()] == ["p2"]
        assert await store.get_entity("p1") is None

    @pytest.mark.asyncio
    async def test_remove_unknown_leaves_index_untouched(self, store, blob_root):
        await store.create(_post("p1"))
        index_file = blob_root / "posts" / "index.json"
        before = index_file.stat().st_mtime_ns

        assert await store.remove("ghost") is False

        assert index_file.stat().st_mtime_ns == before
        assert [e.id for e in await store.get_index()] == ["p1"]


@pytest.mark.fast
class TestSlugLookup:
    """get_entity_by_slug()."""

    @pytest.mark.asyncio
    async def test_finds_by_slug(self, store):
        await store.create(_post("p1", slug="hello"))
        found = await store.get_entity_by_slug("hello")
        assert found is not None and found.id == "p1"

    @pytest.mark.asyncio
    async def test_unknown_slug(self, store):
        await store.create(_post("p1", slug="hello"))
        assert await store.get_entity_by_slug("goodbye") is None

    @pytest.mark.asyncio
    async def test_duplicate_slug_first_in_index_wins(self, store):
        await store.create(_post("p1", slug="dupe", title="First"))
        await store.create(_post("p2", slug="dupe", title="Second"))
        found = await store.get_entity_by_slug("dupe")
        assert found.id == "p1"


@pytest.mark.fast
class TestReadResults:
    """lookup_* distinguishes found, absent and failed reads."""

    @pytest.mark.asyncio
    async def test_found(self, store):
        await store.create(_post("p1"))
        result = await store.lookup_entity("p1")
        assert result.status == ReadStatus.FOUND
        assert result.value.id == "p1"

    @pytest.mark.asyncio
    async def test_not_found(self, store):
        assert (await store.lookup_entity("p1")).status == ReadStatus.NOT_FOUND
        assert (await store.lookup_index()).status == ReadStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_storage_failure(self):
        store = DocumentStore(_failing_backend(BlobStorageError("boom")), "posts", Post, PostMeta)
        result = await store.lookup_entity("p1")
        assert result.status == ReadStatus.ERROR
        assert isinstance(result.error, BlobStorageError)
        assert (await store.lookup_index()).status == ReadStatus.ERROR

    @pytest.mark.asyncio
    async def test_malformed_entity(self, store, backend):
        await backend.put("posts/p1.json", b"not json")
        assert (await store.lookup_entity("p1")).status == ReadStatus.ERROR

    @pytest.mark.asyncio
    async def test_malformed_index(self, store, backend):
        await backend.put("posts/index.json", b'{"not": "a list"}')
        assert (await store.lookup_index()).status == ReadStatus.ERROR

    @pytest.mark.asyncio
    async def test_get_degrades_and_logs(self, caplog):
        store = DocumentStore(_failing_backend(BlobStorageError("boom")), "posts", Post, PostMeta)
        with caplog.at_level(logging.WARNING, logger="lateedition.storage.store"):
            assert await store.get_index() == []
            assert await store.get_entity("p1") is None
        assert "boom" in caplog.text


@pytest.mark.fast
class TestIndexWrites:
    """mutate_index() safety."""

    @pytest.mark.asyncio
    async def test_unreadable_index_is_not_overwritten(self):
        backend = _failing_backend(BlobStorageError("boom"))
        store = DocumentStore(backend, "posts", Post, PostMeta)

        with pytest.raises(BlobStorageError):
            await store.mutate_index(lambda entries: entries + [])

        backend.put.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_change_is_retried(self, store, monkeypatch):
        await store.create(_post("p1", slug="one"))
        original = store._current_index_digest
        calls = []

        async def digest_after_other_writer():
            calls.append(1)
            if len(calls) == 1:
                # Another writer lands p2 between our read and our write.
                entries = (await store.lookup_index()).value
                await store.save_index(entries + [store.to_meta(_post("p2", slug="two"))])
            return await original()

        monkeypatch.setattr(store, "_current_index_digest", digest_after_other_writer)

        await store.mutate_index(
            lambda entries: entries + [store.to_meta(_post("p3", slug="three"))]
        )

        assert [e.id for e in await store.get_index()] == ["p1", "p2", "p3"]
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self, backend, monkeypatch):
        store = DocumentStore(backend, "posts", Post, PostMeta, index_write_retries=2)
        monkeypatch.setattr(store, "_current_index_digest", AsyncMock(return_value="moved"))

        with pytest.raises(IndexConflictError) as exc_info:
            await store.mutate_index(lambda entries: entries)

        assert exc_info.value.attempts == 2
        assert await store.get_index() == []
