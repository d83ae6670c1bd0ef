"""Lookbook aggregate document."""

from __future__ import annotations

from pydantic import Field, model_validator

from lateedition.schemas.base import Document


class LookbookImage(Document):
    id: str
    url: str
    order: int = 0


class LookbookData(Document):
    """The whole lookbook, stored as one blob. Images are kept sorted by ``order``."""

    images: list[LookbookImage] = Field(default_factory=list)

    @model_validator(mode="after")
    def sort_images(self) -> "LookbookData":
        self.images = sorted(self.images, key=lambda image: image.order)
        return self
