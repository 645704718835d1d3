"""
Auth API routes — signup, login, me.

Route prefix: /auth
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth import service
from auth.dependencies import db_session, get_current_user
from database.models import User
from utils.schemas import AuthResponse, LoginRequest, SignupRequest, UserPublic

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    session: AsyncSession = Depends(db_session),
) -> AuthResponse:
    """Register a new user."""
    return await service.signup(session, name=req.name, email=req.email, password=req.password)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
) -> AuthResponse:
    """Login with email + password."""
    return await service.login(session, email=req.email, password=req.password)


@router.get("/me", response_model=UserPublic)
async def me(user: User = Depends(get_current_user)) -> UserPublic:
    return UserPublic.model_validate(user)
