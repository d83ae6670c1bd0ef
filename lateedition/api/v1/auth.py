"""Admin login endpoints.

Endpoints:
    POST /api/v1/auth/login   - Exchange the admin password for a token cookie
    POST /api/v1/auth/logout  - Clear the token cookie
    GET  /api/v1/auth/me      - Whether the caller is an admin
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from lateedition.auth.dependencies import (
    check_password,
    clear_admin_cookie,
    get_token_service,
    is_admin,
    set_admin_cookie,
)
from lateedition.auth.tokens import AdminTokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    password: str | None = None


@router.post("/login")
async def login(
    payload: LoginRequest,
    response: Response,
    tokens: AdminTokenService = Depends(get_token_service),
) -> dict[str, bool]:
    if not check_password(payload.password):
        logger.warning("Failed admin login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )
    set_admin_cookie(response, tokens.issue())
    return {"success": True}


@router.post("/logout")
async def logout(response: Response) -> dict[str, bool]:
    clear_admin_cookie(response)
    return {"success": True}


@router.get("/me")
async def me(admin: bool = Depends(is_admin)) -> dict[str, bool]:
    return {"admin": admin}
