"""Stateless admin token issuance and verification.

Token format::

    base64(payload_json) + "." + hex(HMAC-SHA256(payload_json, secret))

with ``payload_json = {"role":"admin","exp":<epoch ms>}``. The payload is
signed, not encrypted. Tokens cannot be revoked before expiry; rotating the
secret invalidates every outstanding token.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
from datetime import timedelta

from lateedition.clock import Clock, to_epoch_ms, utc_now

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
TOKEN_EXPIRY_DAYS = 7
TOKEN_MAX_AGE_SECONDS = TOKEN_EXPIRY_DAYS * 24 * 60 * 60


class AuthConfigError(RuntimeError):
    """The signing secret is not configured."""


def _sign(payload: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


class AdminTokenService:
    """Issues and verifies admin bearer tokens.

    Attributes:
        clock: Time source for issuance and expiry checks.
    """

    def __init__(self, secret: str | None, *, clock: Clock = utc_now) -> None:
        if not secret:
            raise AuthConfigError("ADMIN_PASSWORD environment variable is not set")
        self._secret = secret
        self.clock = clock

    def issue(self) -> str:
        """Create a token valid for TOKEN_EXPIRY_DAYS.

        Returns:
            Signed token string.
        """
        exp = to_epoch_ms(self.clock() + timedelta(days=TOKEN_EXPIRY_DAYS))
        payload = json.dumps({"role": ADMIN_ROLE, "exp": exp}, separators=(",", ":"))
        encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
        return f"{encoded}.{_sign(payload, self._secret)}"

    def verify(self, token: str | None) -> bool:
        """Check a token's signature, expiry and role.

        Never raises: malformed input of any kind is simply rejected.
        """
        if not token or not isinstance(token, str):
            return False
        parts = token.split(".")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return False
        payload_b64, signature = parts

        try:
            payload = base64.b64decode(payload_b64, validate=True).decode("utf-8")
        except (binascii.Error, ValueError):
            return False

        expected = _sign(payload, self._secret)
        if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
            return False

        try:
            data = json.loads(payload)
        except ValueError:
            return False
        if not isinstance(data, dict):
            return False

        exp = data.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return False
        if exp < to_epoch_ms(self.clock()):
            logger.info("Rejected expired admin token")
            return False

        return data.get("role") == ADMIN_ROLE
