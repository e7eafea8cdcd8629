"""Async SQLAlchemy engine and session factory.

SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via
FastAPI.
"""

from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from linkvault.config import settings


def _engine_options(database_url: str) -> dict:
    """Pool sizing applies to server databases only; SQLite picks its own pool."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    return {"pool_size": 5, "max_overflow": 15, "pool_pre_ping": True}


# echo=True in debug to see SQL queries.
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes.

    Uncommitted work (e.g. after a service raised) is rolled back on close.
    """
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
