"""Tests for lateedition.rsvps module.

Covers:
    - upsert by (event, email), case-insensitive
    - headcount counts going RSVPs and their guests
    - delete
    - simultaneous submissions for one guest
"""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from lateedition.models import Base
from lateedition.rsvps import (
    delete_rsvp,
    get_event_rsvps,
    get_rsvp_by_email,
    get_rsvp_count,
    rsvp_to_event,
)


@pytest.mark.fast
class TestRsvps:
    """RSVP storage."""

    @pytest.mark.asyncio
    async def test_create(self, db_session):
        rsvp = await rsvp_to_event(db_session, "ev1", name="Ada", email=" Ada@Example.com ")
        assert rsvp.id is not None
        assert rsvp.email == "ada@example.com"
        assert rsvp.status == "going"
        assert rsvp.to_dict()["eventId"] == "ev1"

    @pytest.mark.asyncio
    async def test_same_email_updates(self, db_session):
        first = await rsvp_to_event(db_session, "ev1", name="Ada", email="ada@example.com")
        second = await rsvp_to_event(
            db_session, "ev1", name="Ada L.", email="ADA@example.com", status="maybe"
        )
        assert second.id == first.id
        rsvps = await get_event_rsvps(db_session, "ev1")
        assert len(rsvps) == 1
        assert rsvps[0].name == "Ada L."
        assert rsvps[0].status == "maybe"

    @pytest.mark.asyncio
    async def test_same_email_other_event(self, db_session):
        await rsvp_to_event(db_session, "ev1", name="Ada", email="ada@example.com")
        await rsvp_to_event(db_session, "ev2", name="Ada", email="ada@example.com")
        assert len(await get_event_rsvps(db_session, "ev1")) == 1
        assert len(await get_event_rsvps(db_session, "ev2")) == 1

    @pytest.mark.asyncio
    async def test_headcount(self, db_session):
        await rsvp_to_event(db_session, "ev1", name="Ada", email="a@example.com", plus_one=2)
        await rsvp_to_event(db_session, "ev1", name="Bob", email="b@example.com")
        await rsvp_to_event(
            db_session, "ev1", name="Cy", email="c@example.com", status="maybe", plus_one=3
        )
        assert await get_rsvp_count(db_session, "ev1") == 4

    @pytest.mark.asyncio
    async def test_headcount_empty(self, db_session):
        assert await get_rsvp_count(db_session, "ev1") == 0

    @pytest.mark.asyncio
    async def test_delete(self, db_session):
        rsvp = await rsvp_to_event(db_session, "ev1", name="Ada", email="a@example.com")
        assert await delete_rsvp(db_session, rsvp.id) is True
        assert await get_rsvp_by_email(db_session, "ev1", "a@example.com") is None
        assert await delete_rsvp(db_session, rsvp.id) is False


@pytest.fixture
async def file_session_factory(tmp_path):
    """Sessions on separate connections to one SQLite file, so writers contend."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'rsvps.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.mark.fast
class TestConcurrentRsvps:
    """Simultaneous submissions for the same guest."""

    @pytest.mark.asyncio
    async def test_simultaneous_same_email_is_one_row(self, file_session_factory):
        async def submit(name: str, plus_one: int) -> None:
            async with file_session_factory() as session:
                await rsvp_to_event(
                    session, "ev1", name=name, email="Same@x.io", plus_one=plus_one
                )
                await session.commit()

        results = await asyncio.gather(
            submit("Ada", 1), submit("Ada L.", 2), return_exceptions=True
        )
        assert results == [None, None]

        async with file_session_factory() as session:
            rsvps = await get_event_rsvps(session, "ev1")
            assert len(rsvps) == 1
            assert rsvps[0].email == "same@x.io"
            assert await get_rsvp_count(session, "ev1") == 1 + rsvps[0].plus_one

    @pytest.mark.asyncio
    async def test_update_keeps_created_at(self, db_session):
        first = await rsvp_to_event(db_session, "ev1", name="Ada", email="a@example.com")
        created = first.created_at
        second = await rsvp_to_event(
            db_session, "ev1", name="Ada", email="a@example.com", note="late"
        )
        assert second.note == "late"
        assert second.created_at == created
