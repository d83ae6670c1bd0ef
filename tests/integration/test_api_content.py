"""Integration tests for the content API.

Tests:
    - Post lifecycle over HTTP
    - Admin-only mutations
    - Cache headers on listings
    - Events, albums and staff endpoints
"""

import pytest

POST = {"title": "Hello", "slug": "hello", "content": "<p>Hi</p>"}


@pytest.mark.integration
class TestPostLifecycle:
    """Create, update and delete a post through the API."""

    @pytest.mark.asyncio
    async def test_create_update_delete(self, admin_client, clock):
        response = await admin_client.post("/api/v1/posts", json=POST)
        assert response.status_code == 201
        post = response.json()
        assert post["id"]
        assert post["createdAt"] == post["updatedAt"]

        listing = (await admin_client.get("/api/v1/posts")).json()
        assert len(listing) == 1
        assert "content" not in listing[0]

        clock.advance(minutes=1)
        response = await admin_client.put(f"/api/v1/posts/{post['id']}", json={"title": "Hello v2"})
        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "Hello v2"
        assert updated["slug"] == "hello"
        assert updated["content"] == "<p>Hi</p>"
        assert updated["createdAt"] == post["createdAt"]
        assert updated["updatedAt"] != post["updatedAt"]

        response = await admin_client.delete(f"/api/v1/posts/{post['id']}")
        assert response.json() == {"success": True}

        assert (await admin_client.get("/api/v1/posts")).json() == []
        assert (await admin_client.get(f"/api/v1/posts/{post['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_get_by_slug(self, admin_client):
        created = (await admin_client.post("/api/v1/posts", json=POST)).json()
        response = await admin_client.get("/api/v1/posts/slug/hello")
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert (await admin_client.get("/api/v1/posts/slug/nope")).status_code == 404

    @pytest.mark.asyncio
    async def test_create_requires_fields(self, admin_client):
        response = await admin_client.post("/api/v1/posts", json={"title": "Hello"})
        assert response.status_code == 400
        assert response.json()["error"] == "Title, slug, and content are required"

    @pytest.mark.asyncio
    async def test_wrong_field_type_is_bad_request(self, admin_client):
        response = await admin_client.post(
            "/api/v1/posts", json={"title": "Hello", "slug": "hello", "content": 123}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert "content" in body["detail"]

    @pytest.mark.asyncio
    async def test_non_object_body_is_bad_request(self, admin_client):
        response = await admin_client.put("/api/v1/posts/p1", json=["not", "an", "object"])
        assert response.status_code == 400
        assert set(response.json()) == {"error", "detail"}

    @pytest.mark.asyncio
    async def test_update_missing(self, admin_client):
        response = await admin_client.put("/api/v1/posts/ghost", json={"title": "x"})
        assert response.status_code == 404


@pytest.mark.integration
class TestAdminOnly:
    """Mutations need the admin cookie."""

    @pytest.mark.asyncio
    async def test_create_without_cookie(self, client):
        response = await client.post("/api/v1/posts", json=POST)
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_bad_cookie(self, client):
        client.cookies.set("admin_token", "garbage")
        response = await client.delete("/api/v1/events/e1")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_reads_are_public(self, client):
        assert (await client.get("/api/v1/posts")).status_code == 200
        assert (await client.get("/api/v1/albums")).status_code == 200


@pytest.mark.integration
class TestCacheHeaders:
    """Listing cache policy."""

    @pytest.mark.asyncio
    async def test_public_cache(self, client):
        response = await client.get("/api/v1/posts")
        assert response.headers["cache-control"] == "public, s-maxage=300, stale-while-revalidate=60"

    @pytest.mark.asyncio
    async def test_fresh_bypasses_cache(self, client):
        response = await client.get("/api/v1/events?fresh=1")
        assert response.headers["cache-control"] == "no-store"


@pytest.mark.integration
class TestOtherCollections:
    """Events, albums and staff."""

    @pytest.mark.asyncio
    async def test_event_slug_defaults_from_title(self, admin_client):
        response = await admin_client.post(
            "/api/v1/events",
            json={"title": "Launch Party!", "content": "<p>Come</p>", "rsvpEnabled": True},
        )
        assert response.status_code == 201
        event = response.json()
        assert event["slug"] == "launch-party"
        assert event["rsvpEnabled"] is True

    @pytest.mark.asyncio
    async def test_events_newest_first(self, admin_client, clock):
        first = (await admin_client.post("/api/v1/events", json={"title": "A", "content": "a"})).json()
        clock.advance(days=1)
        second = (await admin_client.post("/api/v1/events", json={"title": "B", "content": "b"})).json()
        listing = (await admin_client.get("/api/v1/events")).json()
        assert [e["id"] for e in listing] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_album_photos(self, admin_client):
        response = await admin_client.post(
            "/api/v1/albums",
            json={"title": "Opening Night", "photos": [{"url": "/1.jpg", "caption": "Door"}]},
        )
        assert response.status_code == 201
        album = response.json()
        assert album["slug"] == "opening-night"
        assert album["photoCount"] == 1

        listing = (await admin_client.get("/api/v1/albums")).json()
        assert listing[0]["photoCount"] == 1
        assert "photos" not in listing[0]

    @pytest.mark.asyncio
    async def test_album_requires_title(self, admin_client):
        response = await admin_client.post("/api/v1/albums", json={"photos": []})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_staff_sorted_by_order(self, admin_client):
        await admin_client.post("/api/v1/staff", json={"name": "Editor", "order": 2})
        await admin_client.post("/api/v1/staff", json={"name": "Founder", "order": 1})
        listing = (await admin_client.get("/api/v1/staff")).json()
        assert [m["name"] for m in listing] == ["Founder", "Editor"]

    @pytest.mark.asyncio
    async def test_staff_requires_name(self, admin_client):
        response = await admin_client.post("/api/v1/staff", json={"role": "Editor"})
        assert response.status_code == 400
