"""Photo album documents."""

from __future__ import annotations

from pydantic import Field, model_validator

from lateedition.schemas.base import Document, Photo


class AlbumMeta(Document):
    """Index entry for an album. Carries a photo count instead of the photos."""

    id: str
    title: str
    slug: str
    description: str = ""
    cover_image: str = ""
    photo_count: int = 0
    created_at: str
    updated_at: str


class Album(AlbumMeta):
    """Full album document."""

    photos: list[Photo] = Field(default_factory=list)

    @model_validator(mode="after")
    def sync_photo_count(self) -> "Album":
        self.photo_count = len(self.photos)
        return self
