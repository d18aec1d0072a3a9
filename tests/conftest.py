"""Test fixtures — a fresh in-memory database per test.

Learn: Each test gets its own SQLite database (aiosqlite + StaticPool so
every session shares the one in-memory connection). The app's get_db is
overridden to hand out sessions from that database; auth is NOT
overridden, so every request goes through real token checks.

Settings are frozen and read at import, so test values are put in the
environment before anything from inkpost is imported.
"""

import os

os.environ.setdefault("INKPOST_JWT_SECRET", "test-secret-do-not-use-0123456789")
os.environ.setdefault("INKPOST_BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from inkpost.db.engine import create_schema, get_db
from inkpost.main import app

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture()
async def session_factory():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for driving services directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with get_db pointed at the per-test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def codec():
    return app.state.token_codec


@pytest.fixture()
def bearer():
    """Build an Authorization header for a token."""

    def _bearer(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture()
def register(client):
    """Register a user over HTTP; returns (user dict, token)."""

    async def _register(username: str, email: str | None = None, password: str = "pw-secret-1"):
        r = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@x.com",
                "password": password,
            },
        )
        assert r.status_code == 201, r.text
        data = r.json()
        return data["user"], data["token"]

    return _register
