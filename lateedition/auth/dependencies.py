"""FastAPI dependencies and cookie helpers for admin auth.

The admin token travels in an HTTP-only cookie whose max age matches the
token's own lifetime.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Depends, HTTPException, Request, Response, status

from lateedition.auth.tokens import TOKEN_MAX_AGE_SECONDS, AdminTokenService
from lateedition.config import get_settings

logger = logging.getLogger(__name__)

COOKIE_NAME = "admin_token"


def get_token_service() -> AdminTokenService:
    """Build the token service from settings.

    Raises:
        AuthConfigError: If ADMIN_PASSWORD is not set.
    """
    return AdminTokenService(get_settings().ADMIN_PASSWORD)


def check_password(password: str | None) -> bool:
    """Compare a login attempt against ADMIN_PASSWORD in constant time."""
    expected = get_settings().ADMIN_PASSWORD
    if not expected or not password:
        return False
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


async def is_admin(
    request: Request,
    tokens: AdminTokenService = Depends(get_token_service),
) -> bool:
    """True when the request carries a valid admin cookie."""
    return tokens.verify(request.cookies.get(COOKIE_NAME))


async def require_admin(admin: bool = Depends(is_admin)) -> None:
    """Reject the request with 401 unless it carries a valid admin cookie."""
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


def set_admin_cookie(response: Response, token: str) -> None:
    """Attach the admin token cookie to a response."""
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=TOKEN_MAX_AGE_SECONDS,
        path="/",
        secure=get_settings().is_production,
        httponly=True,
        samesite="lax",
    )


def clear_admin_cookie(response: Response) -> None:
    response.delete_cookie(key=COOKIE_NAME, path="/")
