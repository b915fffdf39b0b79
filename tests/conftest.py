"""Shared test fixtures."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from uptimeboard import models  # noqa: F401  (registers tables)
from uptimeboard.database import Base
from uptimeboard.services.history_store import HistoryStore
from uptimeboard.services.state_store import StateStore


def _engine():
    return create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
async def session_factory():
    """Session factory bound to a fresh in-memory database with all tables."""
    engine = _engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def broken_session_factory():
    """Session factory whose database has no tables, so every query fails."""
    engine = _engine()
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def state_store(session_factory) -> StateStore:
    return StateStore(session_factory)


@pytest.fixture
def history_store(session_factory) -> HistoryStore:
    return HistoryStore(session_factory)
