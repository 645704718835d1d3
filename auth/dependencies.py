"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_current_user`` and ``require_admin``
dependencies that are used across all protected routes.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.service import authenticate, ensure_admin
from core.errors import Unauthenticated
from database.models import User
from database.session import get_db_session

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    session: AsyncSession = Depends(db_session),
) -> User:
    """Verify the Bearer token and return the authenticated ``User``."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Missing bearer token")
    return await authenticate(session, credentials.credentials)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    return ensure_admin(user)
