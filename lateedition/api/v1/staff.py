"""Staff bio API endpoints. Staff list in ``order``, and have no slugs."""

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
from lateedition.storage.service import StorageService

router = APIRouter(prefix="/staff", tags=["staff"])


class StaffInput(Document):
    name: str | None = None
    role: str | None = None
    bio: str | None = None
    cover_image: str | None = None
    order: int | None = None
    photos: list[Photo] | None = None


@router.get("")
async def list_staff(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    return document_response(await storage.staff.list(), headers=cache_headers(request))


@router.post("", dependencies=[Depends(require_admin)])
async def create_staff_member(
    payload: StaffInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    if not payload.name:
        raise bad_request("Name is required")

    with storage_errors("create staff member"):
        member = await storage.staff.create(changes_from(payload))
    return document_response(member, status_code=status.HTTP_201_CREATED)


@router.get("/{member_id}")
async def get_staff_member(
    member_id: str,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    member = await storage.staff.get(member_id)
    if member is None:
        raise not_found("Staff member not found")
    return document_response(member)


@router.put("/{member_id}", dependencies=[Depends(require_admin)])
async def update_staff_member(
    member_id: str,
    payload: StaffInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    with storage_errors("update staff member"):
        member = await storage.staff.update(member_id, changes_from(payload))
    if member is None:
        raise not_found("Staff member not found")
    return document_response(member)


@router.delete("/{member_id}", dependencies=[Depends(require_admin)])
async def delete_staff_member(
    member_id: str,
    storage: StorageService = Depends(get_storage),
) -> dict[str, bool]:
    with storage_errors("delete staff member"):
        await storage.staff.delete(member_id)
    return {"success": True}
