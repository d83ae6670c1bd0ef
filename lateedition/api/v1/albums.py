"""Photo album API endpoints.

Endpoints:
    GET    /api/v1/albums              - List albums, newest first
    POST   /api/v1/albums              - Create an album (admin)
    GET    /api/v1/albums/slug/{slug}  - Get album by slug
    GET    /api/v1/albums/{id}         - Get album by id
    PUT    /api/v1/albums/{id}         - Update an album (admin)
    DELETE /api/v1/albums/{id}         - Delete an album (admin)
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
from lateedition.schemas.base import Document, Photo
from lateedition.storage.naming import slugify
from lateedition.storage.service import StorageService

router = APIRouter(prefix="/albums", tags=["albums"])


class AlbumInput(Document):
    """Create/update payload. ``photos`` replaces the whole photo list."""

    title: str | None = None
    slug: str | None = None
    description: str | None = None
    cover_image: str | None = None
    photos: list[Photo] | None = None


@router.get("")
async def list_albums(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    return document_response(await storage.albums.list(), headers=cache_headers(request))


@router.post("", dependencies=[Depends(require_admin)])
async def create_album(
    payload: AlbumInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    if not payload.title:
        raise bad_request("Title is required")

    fields = changes_from(payload)
    fields["slug"] = payload.slug or slugify(payload.title)
    with storage_errors("create album"):
        album = await storage.albums.create(fields)
    return document_response(album, status_code=status.HTTP_201_CREATED)


@router.get("/slug/{slug}")
async def get_album_by_slug(
    slug: str,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    album = await storage.albums.get_by_slug(slug)
    if album is None:
        raise not_found("Album not found")
    return document_response(album)


@router.get("/{album_id}")
async def get_album(
    album_id: str,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    album = await storage.albums.get(album_id)
    if album is None:
        raise not_found("Album not found")
    return document_response(album)


@router.put("/{album_id}", dependencies=[Depends(require_admin)])
async def update_album(
    album_id: str,
    payload: AlbumInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    with storage_errors("update album"):
        album = await storage.albums.update(album_id, changes_from(payload))
    if album is None:
        raise not_found("Album not found")
    return document_response(album)


@router.delete("/{album_id}", dependencies=[Depends(require_admin)])
async def delete_album(
    album_id: str,
    storage: StorageService = Depends(get_storage),
) -> dict[str, bool]:
    with storage_errors("delete album"):
        await storage.albums.delete(album_id)
    return {"success": True}
