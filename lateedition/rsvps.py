"""Event RSVPs.

One RSVP per (event, email); responding again updates the existing row.
The write is a single ``INSERT ... ON CONFLICT (event_id, email) DO UPDATE``
so simultaneous submissions for the same guest collapse into one row.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import and_, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from lateedition.models import Rsvp, RsvpStatus

logger = logging.getLogger(__name__)

UPSERT_FIELDS = ("name", "status", "plus_one", "note")


def normalize_email(email: str) -> str:
    return email.lower().strip()


def _dialect_insert(session: AsyncSession):
    """The dialect-specific ``insert`` that supports ``on_conflict_do_update``."""
    dialect = session.get_bind().dialect.name
    if dialect == "sqlite":
        return sqlite.insert
    if dialect == "postgresql":
        return postgresql.insert
    raise NotImplementedError(f"RSVP upsert is not supported on {dialect}")


async def rsvp_to_event(
    session: AsyncSession,
    event_id: str,
    *,
    name: str,
    email: str,
    status: str = RsvpStatus.GOING.value,
    plus_one: int = 0,
    note: str = "",
) -> Rsvp:
    """Create or update an RSVP keyed by event and email.

    Args:
        session: Database session (caller commits).
        event_id: Event document id.
        name: Guest name.
        email: Guest email, matched case-insensitively.
        status: going, maybe or not_going.
        plus_one: Extra guests.
        note: Free-text note.

    Returns:
        The stored RSVP row. ``created_at`` keeps its original value on update.
    """
    insert = _dialect_insert(session)
    stmt = insert(Rsvp).values(
        event_id=event_id,
        email=normalize_email(email),
        name=name,
        status=status or RsvpStatus.GOING.value,
        plus_one=plus_one,
        note=note,
        created_at=datetime.now(timezone.utc),
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Rsvp.event_id, Rsvp.email],
        set_={field: stmt.excluded[field] for field in UPSERT_FIELDS},
    ).returning(Rsvp)

    result = await session.execute(stmt, execution_options={"populate_existing": True})
    rsvp = result.scalar_one()
    logger.info(f"RSVP recorded for event {event_id}: {rsvp.status}")
    return rsvp


async def get_event_rsvps(session: AsyncSession, event_id: str) -> list[Rsvp]:
    result = await session.execute(
        select(Rsvp).where(Rsvp.event_id == event_id).order_by(Rsvp.id)
    )
    return list(result.scalars())


async def get_rsvp_by_email(session: AsyncSession, event_id: str, email: str) -> Rsvp | None:
    result = await session.execute(
        select(Rsvp).where(
            and_(Rsvp.event_id == event_id, Rsvp.email == normalize_email(email))
        )
    )
    return result.scalar_one_or_none()


async def delete_rsvp(session: AsyncSession, rsvp_id: int) -> bool:
    """Delete an RSVP by id. Returns whether it existed."""
    rsvp = await session.get(Rsvp, rsvp_id)
    if rsvp is None:
        return False
    await session.delete(rsvp)
    await session.flush()
    return True


async def get_rsvp_count(session: AsyncSession, event_id: str) -> int:
    """Headcount for an event: going RSVPs plus their extra guests."""
    result = await session.execute(
        select(func.count(Rsvp.id) + func.coalesce(func.sum(Rsvp.plus_one), 0)).where(
            and_(Rsvp.event_id == event_id, Rsvp.status == RsvpStatus.GOING.value)
        )
    )
    return int(result.scalar_one() or 0)
