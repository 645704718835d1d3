"""
Account directory — user lookups and creation.

Email uniqueness is enforced by the ``users.email`` unique constraint; an
insert that trips it is reported as ``DuplicateEmail``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.deadlines import store_call
from core.errors import DuplicateEmail, NotFound
from database.models import User

logger = logging.getLogger(__name__)


def _to_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


@store_call
async def find_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


@store_call
async def get_user(session: AsyncSession, user_id: str | uuid.UUID) -> User:
    """Return the user with ``user_id`` or raise ``NotFound``."""
    uid = _to_uuid(user_id)
    user = await session.get(User, uid) if uid is not None else None
    if user is None:
        raise NotFound(f"User with ID {user_id} not found")
    return user


@store_call
async def create_user(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    password_hash: str,
    phone: Optional[str] = None,
    role: str = "user",
) -> User:
    """
    Insert a user and commit.

    On a unique-constraint hit the session is rolled back, so the directory
    is left exactly as it was, and ``DuplicateEmail`` is raised.
    """
    user = User(
        user_id=uuid.uuid4(),
        name=name,
        email=email,
        password_hash=password_hash,
        phone=phone,
        role=role,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise DuplicateEmail() from None
    return user
