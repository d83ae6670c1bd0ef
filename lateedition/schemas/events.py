"""Event documents."""

from __future__ import annotations

from lateedition.schemas.base import Document


class EventMeta(Document):
    """Index entry for an event: everything except the body."""

    id: str
    title: str
    slug: str
    excerpt: str = ""
    cover_image: str = ""
    rsvp_enabled: bool = False
    created_at: str
    updated_at: str


class Event(EventMeta):
    """Full event document."""

    content: str = ""
