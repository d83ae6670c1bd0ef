"""Event and RSVP API endpoints.

Endpoints:
    GET    /api/v1/events              - List events, newest first
    POST   /api/v1/events              - Create an event (admin)
    GET    /api/v1/events/slug/{slug}  - Get event by slug
    GET    /api/v1/events/{id}         - Get event by id
    PUT    /api/v1/events/{id}         - Update an event (admin)
    DELETE /api/v1/events/{id}         - Delete an event (admin)
    POST   /api/v1/events/{id}/rsvp    - RSVP to an event
    GET    /api/v1/events/{id}/rsvp    - List RSVPs and headcount (admin)
    DELETE /api/v1/events/{id}/rsvp    - Delete one RSVP (admin)
"""

from __future__ import annotations

import math
import re
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

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
from lateedition.database import get_db_session
from lateedition.models import RsvpStatus
from lateedition.rsvps import delete_rsvp, get_event_rsvps, get_rsvp_count, rsvp_to_event
from lateedition.schemas.base import Document
from lateedition.storage.naming import slugify
from lateedition.storage.service import StorageService

router = APIRouter(prefix="/events", tags=["events"])

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_PLUS_ONE = 10
MAX_NOTE_LENGTH = 500


def clamp_plus_one(value: Any) -> int:
    """Coerce a guest count to 0..MAX_PLUS_ONE; anything non-numeric counts as 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, min(MAX_PLUS_ONE, int(number)))


class EventInput(Document):
    """Create/update payload. On update, omitted or null fields are kept."""

    title: str | None = None
    slug: str | None = None
    excerpt: str | None = None
    cover_image: str | None = None
    content: str | None = None
    rsvp_enabled: bool | None = None


class RsvpInput(Document):
    name: str | None = None
    email: str | None = None
    status: str | None = None
    plus_one: Any = None
    note: str | None = None


class RsvpDeleteInput(Document):
    rsvp_id: int | None = None


class RsvpListResponse(Document):
    rsvps: list[dict]
    total_headcount: int


@router.get("")
async def list_events(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    return document_response(await storage.events.list(), headers=cache_headers(request))


@router.post("", dependencies=[Depends(require_admin)])
async def create_event(
    payload: EventInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    if not payload.title or not payload.content:
        raise bad_request("Title and content are required")

    fields = changes_from(payload)
    fields["slug"] = payload.slug or slugify(payload.title)
    with storage_errors("create event"):
        event = await storage.events.create(fields)
    return document_response(event, status_code=status.HTTP_201_CREATED)


@router.get("/slug/{slug}")
async def get_event_by_slug(
    slug: str,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    event = await storage.events.get_by_slug(slug)
    if event is None:
        raise not_found("Event not found")
    return document_response(event)


@router.get("/{event_id}")
async def get_event(
    event_id: str,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    event = await storage.events.get(event_id)
    if event is None:
        raise not_found("Event not found")
    return document_response(event)


@router.put("/{event_id}", dependencies=[Depends(require_admin)])
async def update_event(
    event_id: str,
    payload: EventInput,
    storage: StorageService = Depends(get_storage),
) -> JSONResponse:
    with storage_errors("update event"):
        event = await storage.events.update(event_id, changes_from(payload))
    if event is None:
        raise not_found("Event not found")
    return document_response(event)


@router.delete("/{event_id}", dependencies=[Depends(require_admin)])
async def delete_event(
    event_id: str,
    storage: StorageService = Depends(get_storage),
) -> dict[str, bool]:
    with storage_errors("delete event"):
        await storage.events.delete(event_id)
    return {"success": True}


# ---------- RSVPs ----------


@router.post("/{event_id}/rsvp", status_code=status.HTTP_201_CREATED)
async def submit_rsvp(
    event_id: str,
    payload: RsvpInput,
    storage: StorageService = Depends(get_storage),
    session: AsyncSession = Depends(get_db_session),
) -> dict:
    """RSVP to an event. Responding again with the same email updates the RSVP."""
    event = await storage.events.get(event_id)
    if event is None:
        raise not_found("Event not found")
    if not event.rsvp_enabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="RSVP is not enabled for this event",
        )

    name = (payload.name or "").strip()
    email = (payload.email or "").strip()
    if not name or not email:
        raise bad_request("Name and email are required")
    if not EMAIL_RE.match(email):
        raise bad_request("Invalid email address")

    valid_statuses = {s.value for s in RsvpStatus}
    if payload.status and payload.status not in valid_statuses:
        raise bad_request("Invalid status. Must be going, maybe, or not_going")

    rsvp = await rsvp_to_event(
        session,
        event_id,
        name=name,
        email=email,
        status=payload.status or RsvpStatus.GOING.value,
        plus_one=clamp_plus_one(payload.plus_one),
        note=(payload.note or "").strip()[:MAX_NOTE_LENGTH],
    )
    return rsvp.to_dict()


@router.get(
    "/{event_id}/rsvp",
    response_model=RsvpListResponse,
    dependencies=[Depends(require_admin)],
)
async def list_rsvps(
    event_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> RsvpListResponse:
    rsvps = await get_event_rsvps(session, event_id)
    count = await get_rsvp_count(session, event_id)
    return RsvpListResponse(rsvps=[r.to_dict() for r in rsvps], total_headcount=count)


@router.delete("/{event_id}/rsvp", dependencies=[Depends(require_admin)])
async def remove_rsvp(
    event_id: str,
    payload: RsvpDeleteInput,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    if not payload.rsvp_id:
        raise bad_request("rsvpId is required")
    await delete_rsvp(session, payload.rsvp_id)
    return {"success": True}
