"""Site settings endpoints.

Endpoints:
    GET /api/v1/settings?key=...  - Read one setting ({"value": ... | null})
    PUT /api/v1/settings          - Write one setting (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from lateedition.api.v1.common import bad_request
from lateedition.auth.dependencies import require_admin
from lateedition.database import get_db_session
from lateedition.site_settings import get_setting, set_setting

router = APIRouter(prefix="/settings", tags=["settings"])


class SettingInput(BaseModel):
    key: str | None = None
    value: str | None = None


class SettingValue(BaseModel):
    value: str | None


@router.get("", response_model=SettingValue)
async def read_setting(
    key: str | None = Query(default=None),
    session: AsyncSession = Depends(get_db_session),
) -> SettingValue:
    if not key:
        raise bad_request("key parameter is required")
    return SettingValue(value=await get_setting(session, key))


@router.put("", dependencies=[Depends(require_admin)])
async def write_setting(
    payload: SettingInput,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    if not payload.key or payload.value is None:
        raise bad_request("key and value are required")
    await set_setting(session, payload.key, payload.value)
    return {"success": True}
