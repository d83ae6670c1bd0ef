"""Auth module: admin token signing and the cookie that carries it."""

from lateedition.auth.dependencies import (
    COOKIE_NAME,
    check_password,
    clear_admin_cookie,
    get_token_service,
    is_admin,
    require_admin,
    set_admin_cookie,
)
from lateedition.auth.tokens import (
    TOKEN_EXPIRY_DAYS,
    TOKEN_MAX_AGE_SECONDS,
    AdminTokenService,
    AuthConfigError,
)

__all__ = [
    "COOKIE_NAME",
    "TOKEN_EXPIRY_DAYS",
    "TOKEN_MAX_AGE_SECONDS",
    "AdminTokenService",
    "AuthConfigError",
    "check_password",
    "clear_admin_cookie",
    "get_token_service",
    "is_admin",
    "require_admin",
    "set_admin_cookie",
]
