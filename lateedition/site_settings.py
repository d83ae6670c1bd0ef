"""Key/value site settings backed by the ``site_settings`` table."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lateedition.models import SiteSetting

logger = logging.getLogger(__name__)


async def get_setting(session: AsyncSession, key: str) -> str | None:
    """Read a setting.

    Returns:
        The stored value, or None when unset or when the read fails.
    """
    try:
        row = await session.get(SiteSetting, key)
    except SQLAlchemyError as e:
        logger.warning(f"Setting read failed for '{key}': {e}")
        return None
    return row.value if row is not None else None


async def set_setting(session: AsyncSession, key: str, value: str) -> None:
    """Insert or overwrite a setting (caller commits)."""
    row = await session.get(SiteSetting, key)
    if row is None:
        session.add(SiteSetting(key=key, value=value))
    else:
        row.value = value
    await session.flush()
    logger.info(f"Setting updated: {key}")
