"""Shared base for JSON documents persisted in blob storage.

Documents are written with camelCase keys (``coverImage``, ``createdAt``)
and accept either camelCase or snake_case on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Document(BaseModel):
    """Base model for stored documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_bytes(self) -> bytes:
        """Serialize with camelCase keys."""
        return self.model_dump_json(by_alias=True).encode("utf-8")


class Photo(Document):
    """A captioned photo inside an album or staff bio."""

    url: str
    caption: str = ""
