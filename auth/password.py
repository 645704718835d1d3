"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt

from config.settings import config
from core.deadlines import run_crypto
from core.errors import ValidationError

# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (auto-salted, work factor from config)."""
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            "Password too long",
            errors=[{"field": "password", "message": f"at most {MAX_PASSWORD_BYTES} bytes"}],
        )
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=config.bcrypt_rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


async def hash_password_async(password: str) -> str:
    return await run_crypto(hash_password, password)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await run_crypto(verify_password, password, password_hash)
