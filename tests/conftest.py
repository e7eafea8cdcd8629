"""Test fixtures — a fresh in-memory SQLite database per test.

The server settings are read at import time, so the environment is set
up before anything from linkvault is imported:

- an in-memory SQLite URL (aiosqlite) instead of PostgreSQL
- a test-only JWT secret
- bcrypt cost 4 so hashing doesn't dominate test time

Each test gets its own engine with the schema created from the models;
the app's get_db dependency is overridden to hand out sessions bound to
it. Auth is never mocked: protected routes go through the real gate.
"""

import os
import uuid

os.environ.setdefault("LINKVAULT_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LINKVAULT_JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("LINKVAULT_BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from linkvault.db.engine import get_db  # noqa: E402
from linkvault.db.models import Base  # noqa: E402
from linkvault.main import app  # noqa: E402


@pytest_asyncio.fixture()
async def session_factory():
    """Per-test in-memory database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for calling services directly, outside HTTP."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client against the app with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


async def register_and_login(client, email=None, password="password_123"):
    """Register a user, log in, and return (user, auth headers)."""
    email = email or unique_email()
    r = await client.post("/api/users", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    user = r.json()["user"]

    r = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    token = r.json()["token"]
    return user, {"Authorization": f"Bearer {token}"}
