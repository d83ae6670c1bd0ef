"""Staff bio documents."""

from __future__ import annotations

from pydantic import Field

from lateedition.schemas.base import Document, Photo


class StaffMemberMeta(Document):
    """Index entry for a staff member. Staff have no slug; they sort by ``order``."""

    id: str
    name: str
    role: str = ""
    bio: str = ""
    cover_image: str = ""
    order: int = 0
    created_at: str
    updated_at: str


class StaffMember(StaffMemberMeta):
    """Full staff member document."""

    photos: list[Photo] = Field(default_factory=list)
