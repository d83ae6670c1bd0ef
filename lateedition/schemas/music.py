"""Music page aggregate document."""

from __future__ import annotations

from pydantic import Field, model_validator

from lateedition.schemas.base import Document


class Mix(Document):
    id: str
    title: str
    artist: str = ""
    url: str
    order: int = 0


class StaffPick(Document):
    id: str
    name: str = ""
    label: str = ""
    spotify_url: str
    order: int = 0


class MusicData(Document):
    """Mixes and staff picks, stored as one blob. Both lists sort by ``order``."""

    mixes: list[Mix] = Field(default_factory=list)
    staff_picks: list[StaffPick] = Field(default_factory=list)

    @model_validator(mode="after")
    def sort_lists(self) -> "MusicData":
        self.mixes = sorted(self.mixes, key=lambda mix: mix.order)
        self.staff_picks = sorted(self.staff_picks, key=lambda pick: pick.order)
        return self
