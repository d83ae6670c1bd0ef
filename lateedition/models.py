"""SQLAlchemy models.

Only key/value site settings and event RSVPs are relational; every content
entity is a JSON blob (see ``lateedition.storage``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class RsvpStatus(str, Enum):
    GOING = "going"
    MAYBE = "maybe"
    NOT_GOING = "not_going"


class SiteSetting(Base):
    """One key/value site setting."""

    __tablename__ = "site_settings"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")


class Rsvp(Base):
    """An RSVP to an event. One per (event, email).

    Attributes:
        event_id: Id of the event document in blob storage
        email: Lowercased, trimmed email address
        status: going, maybe or not_going
        plus_one: Extra guests (0-10)
    """

    __tablename__ = "rsvps"
    __table_args__ = (
        UniqueConstraint("event_id", "email", name="rsvps_event_email_idx"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=RsvpStatus.GOING.value)
    plus_one: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        created = self.created_at
        if created is not None and created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return {
            "id": self.id,
            "eventId": self.event_id,
            "name": self.name,
            "email": self.email,
            "status": self.status,
            "plusOne": self.plus_one,
            "note": self.note,
            "createdAt": created.isoformat() if created else None,
        }
