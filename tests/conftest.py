"""Shared pytest fixtures for rlbandit tests."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from rlbandit.models import Base


class FakeClock:
    """Settable stand-in for ``time.time``."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return float(self.now)

    def advance(self, seconds: int) -> None:
        self.now += seconds


class SessionManager:
    """Fresh in-memory SQLite database per ``async with`` block."""

    def __init__(self) -> None:
        self._engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False, class_=AsyncSession)
        self._session = None

    async def __aenter__(self) -> AsyncSession:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._session = self._sessionmaker()
        return await self._session.__aenter__()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is not None:
            await self._session.__aexit__(exc_type, exc, tb)
        await self._engine.dispose()


@pytest.fixture
def run():
    return asyncio.run


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sql_session():
    """Factory for SQLite-backed sessions; skips when aiosqlite is missing."""
    pytest.importorskip("aiosqlite")
    return SessionManager
