"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256 over the
encoded segment.  Secret key is loaded from ``config.jwt_secret`` (env var:
``JWT_SECRET``); there is no fallback secret.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import logging
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Optional

from config.settings import config
from core.errors import ExpiredToken, InvalidToken, MalformedToken

logger = logging.getLogger(__name__)


class SigningKeyError(RuntimeError):
    """Raised at startup when no usable signing key is configured."""


def check_signing_key() -> None:
    """
    Fail fast if ``JWT_SECRET`` is missing, or is a known placeholder
    outside DEBUG.
    """
    if not config.jwt_secret:
        raise SigningKeyError("JWT_SECRET is not set; refusing to start")
    if config.uses_insecure_secret:
        if not config.debug:
            raise SigningKeyError("JWT_SECRET is a placeholder value; refusing to start")
        logger.warning(
            "JWT_SECRET is a development placeholder. Tokens are forgeable; "
            "never run this configuration in production."
        )


def _secret() -> bytes:
    if not config.jwt_secret:
        raise SigningKeyError("JWT_SECRET is not set")
    return config.jwt_secret.encode()


def _sign(segment: bytes) -> str:
    return hmac.new(_secret(), segment, hashlib.sha256).hexdigest()


def create_token(user_id: str, now: Optional[float] = None) -> str:
    """Create a signed token containing ``user_id``, issue time and expiry."""
    issued_at = int(now if now is not None else time.time())
    payload = {"user_id": user_id, "iat": issued_at}
    if config.jwt_expiry_seconds > 0:
        payload["exp"] = issued_at + config.jwt_expiry_seconds
    segment = urlsafe_b64encode(json.dumps(payload).encode()).rstrip(b"=")
    return segment.decode() + "." + _sign(segment)


def verify_token(token: str, now: Optional[float] = None) -> str:
    """
    Verify token and return ``user_id``.

    Raises ``MalformedToken``, ``InvalidToken`` or ``ExpiredToken``.
    """
    parts = token.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedToken()
    try:
        segment = parts[0].encode("ascii")
    except UnicodeEncodeError:
        raise MalformedToken() from None

    if not hmac.compare_digest(parts[1].encode(), _sign(segment).encode()):
        raise InvalidToken()

    try:
        raw = urlsafe_b64decode(segment + b"=" * (-len(segment) % 4))
        payload = json.loads(raw)
    except (binascii.Error, ValueError):
        raise MalformedToken() from None
    if not isinstance(payload, dict) or not isinstance(payload.get("user_id"), str):
        raise MalformedToken()

    exp = payload.get("exp")
    if exp is not None and exp < (now if now is not None else time.time()):
        raise ExpiredToken()
    return payload["user_id"]
