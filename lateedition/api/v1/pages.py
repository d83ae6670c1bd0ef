"""Lookbook and music page endpoints.

Both pages are single aggregate documents replaced wholesale on save.

Endpoints:
    GET  /api/v1/lookbook  - Lookbook images sorted by order
    POST /api/v1/lookbook  - Replace the lookbook (admin)
    GET  /api/v1/music     - Mixes and staff picks sorted by order
    POST /api/v1/music     - Replace the music page (admin)
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from lateedition.api.v1.common import (
    bad_request,
    cache_headers,
    document_response,
    get_storage,
    storage_errors,
)
from lateedition.auth.dependencies import require_admin
from lateedition.schemas import LookbookData, MusicData
from lateedition.storage.service import StorageService

router = APIRouter(tags=["pages"])


@router.get("/lookbook")
async def get_lookbook(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    return document_response(await storage.lookbook.get(), headers=cache_headers(request))


@router.post("/lookbook", dependencies=[Depends(require_admin)])
async def save_lookbook(
    payload: dict[str, Any] = Body(...),
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    if not isinstance(payload.get("images"), list):
        raise bad_request("images array is required")
    try:
        data = LookbookData.model_validate(payload)
    except ValidationError as e:
        raise bad_request(f"Invalid lookbook data: {e.error_count()} errors") from e

    with storage_errors("save lookbook data"):
        saved = await storage.lookbook.save(data)
    return document_response(saved)


@router.get("/music")
async def get_music(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    return document_response(await storage.music.get(), headers=cache_headers(request))


@router.post("/music", dependencies=[Depends(require_admin)])
async def save_music(
    payload: dict[str, Any] = Body(...),
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    if not isinstance(payload.get("mixes"), list) or not isinstance(payload.get("staffPicks"), list):
        raise bad_request("mixes and staffPicks arrays are required")
    try:
        data = MusicData.model_validate(payload)
    except ValidationError as e:
        raise bad_request(f"Invalid music data: {e.error_count()} errors") from e

    with storage_errors("save music data"):
        saved = await storage.music.save(data)
    return document_response(saved)
