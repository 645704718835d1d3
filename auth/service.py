"""
Auth service — signup, login and bearer-token authentication.

Route handlers and dependencies call into here; nothing in this module
knows about HTTP.
"""

from __future__ import annotations

import logging
import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import create_token, verify_token
from auth.password import hash_password_async, verify_password_async
from core.errors import AccountNotFound, DuplicateEmail, Forbidden, InvalidCredentials, NotFound
from database.accounts import create_user, find_by_email, get_user
from database.models import User
from utils.schemas import AuthResponse, UserPublic

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

# Compared against when the email is unknown so both login failures cost
# one bcrypt check.
_DUMMY_HASH = "$2b$10$CwTycUXWue0Thq9StjUM0uJ8.Ot4XJq5M/1zF1m1pP8Y6rGxg9i6W"


def placeholder_phone() -> str:
    """``+91`` followed by a random 10-digit number."""
    return "+91" + str(1_000_000_000 + secrets.randbelow(9_000_000_000))


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_token(str(user.user_id)),
        user=UserPublic.model_validate(user),
    )


async def signup(session: AsyncSession, *, name: str, email: str, password: str) -> AuthResponse:
    """Register a new user with role ``user``."""
    if await find_by_email(session, email) is not None:
        raise DuplicateEmail()

    user = await create_user(
        session,
        name=name,
        email=email,
        password_hash=await hash_password_async(password),
        phone=placeholder_phone(),
    )
    logger.info("Registered user %s", user.user_id)
    return _auth_response(user)


async def login(session: AsyncSession, *, email: str, password: str) -> AuthResponse:
    """
    Login with email + password.

    Unknown email and wrong password raise the same ``InvalidCredentials``.
    """
    user = await find_by_email(session, email)
    stored_hash = user.password_hash if user is not None else _DUMMY_HASH
    password_ok = await verify_password_async(password, stored_hash)
    if user is None or not password_ok:
        raise InvalidCredentials()

    logger.info("Login: %s", user.user_id)
    return _auth_response(user)


async def authenticate(session: AsyncSession, token: str) -> User:
    """
    Resolve a bearer token to its user.

    Token-layer failures propagate as ``Unauthenticated`` subclasses; a
    valid token whose user is gone raises ``AccountNotFound``.
    """
    user_id = verify_token(token)
    try:
        return await get_user(session, user_id)
    except NotFound:
        logger.warning("Token for missing account %s", user_id)
        raise AccountNotFound() from None


def ensure_admin(user: User) -> User:
    if user.role != ADMIN_ROLE:
        raise Forbidden()
    return user
