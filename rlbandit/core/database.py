"""Async database engine and session management."""

from __future__ import annotations

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rlbandit.core.config import settings
from rlbandit.models.base import Base

# Cached by URL so repeated calls share a connection pool
_engine_cache: dict[str, AsyncEngine] = {}


def get_engine(database_url: str | None = None) -> AsyncEngine:
    url = database_url or settings.DATABASE_URL
    engine = _engine_cache.get(url)
    if engine is None:
        engine = create_async_engine(url, pool_pre_ping=True)
        _engine_cache[url] = engine
    return engine


def get_sessionmaker(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(get_engine(database_url), expire_on_commit=False, class_=AsyncSession)


async def get_db(database_url: str | None = None) -> AsyncIterator[AsyncSession]:
    """Yield a session that commits on success and rolls back on error."""
    async with get_sessionmaker(database_url)() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create all tables. Production deployments use the Alembic migration."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
