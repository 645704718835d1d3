"""
Shared fixtures.

Environment is set before any application module is imported so the
settings object picks up a test signing key and an in-memory database.
"""

import os
import tempfile

os.environ.setdefault("JWT_SECRET", "test-signing-key-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="storefront-uploads-"))
os.environ.setdefault("API_URL", "http://testserver")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import update  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from database.models import Base, User  # noqa: E402
from database.session import build_engine, get_db_session  # noqa: E402


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the app with the test database swapped in."""
    from main import app

    async def _override():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()


async def promote_to_admin(session_factory, email: str) -> None:
    """Roles have no API; tests provision admins directly."""
    async with session_factory() as s:
        await s.execute(update(User).where(User.email == email).values(role="admin"))
        await s.commit()


@pytest_asyncio.fixture
async def admin_token(client, session_factory):
    resp = await client.post(
        "/auth/signup",
        json={"name": "Admin", "email": "admin@example.com", "password": "admin-pass"},
    )
    assert resp.status_code == 201
    await promote_to_admin(session_factory, "admin@example.com")
    return resp.json()["token"]


@pytest_asyncio.fixture
async def user_token(client):
    resp = await client.post(
        "/auth/signup",
        json={"name": "Shopper", "email": "shopper@example.com", "password": "shopper-pass"},
    )
    assert resp.status_code == 201
    return resp.json()["token"]


@pytest.fixture
def auth_header():
    def _make(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return _make
