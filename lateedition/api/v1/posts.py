"""Post (article) API endpoints.

Endpoints:
    GET    /api/v1/posts              - List posts, newest first
    POST   /api/v1/posts              - Create a post (admin)
    GET    /api/v1/posts/slug/{slug}  - Get post by slug
    GET    /api/v1/posts/{id}         - Get post by id
    PUT    /api/v1/posts/{id}         - Update a post (admin)
    DELETE /api/v1/posts/{id}         - Delete a post (admin)

Tests:
    - tests/integration/test_api_content.py
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from lateedition.api.v1.common import (
    bad_request,
    cache_headers,
    changes_from,
    document_response,
    get_storage,
    not_found,
    storage_errors,
)
from lateedition.auth.dependencies import require_admin
from lateedition.schemas.base import Document
from lateedition.storage.service import StorageService

router = APIRouter(prefix="/posts", tags=["posts"])


class PostInput(Document):
    """Create/update payload. On update, omitted or null fields are kept."""

    title: str | None = None
    slug: str | None = None
    excerpt: str | None = None
    cover_image: str | None = None
    content: str | None = None


@router.get("")
async def list_posts(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    return document_response(await storage.posts.list(), headers=cache_headers(request))


@router.post("", dependencies=[Depends(require_admin)])
async def create_post(
    payload: PostInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    if not payload.title or not payload.slug or not payload.content:
        raise bad_request("Title, slug, and content are required")

    with storage_errors("create post"):
        post = await storage.posts.create(changes_from(payload))
    return document_response(post, status_code=status.HTTP_201_CREATED)


@router.get("/slug/{slug}")
async def get_post_by_slug(
    slug: str,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    post = await storage.posts.get_by_slug(slug)
    if post is None:
        raise not_found("Post not found")
    return document_response(post)


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    post = await storage.posts.get(post_id)
    if post is None:
        raise not_found("Post not found")
    return document_response(post)


@router.put("/{post_id}", dependencies=[Depends(require_admin)])
async def update_post(
    post_id: str,
    payload: PostInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    with storage_errors("update post"):
        post = await storage.posts.update(post_id, changes_from(payload))
    if post is None:
        raise not_found("Post not found")
    return document_response(post)


@router.delete("/{post_id}", dependencies=[Depends(require_admin)])
async def delete_post(
    post_id: str,
    storage: StorageService = Depends(get_storage),
) -> dict[str, bool]:
    with storage_errors("delete post"):
        await storage.posts.delete(post_id)
    return {"success": True}
