"""Shared fixtures for unit tests.

Repository, scheduler and bot command tests run against an
in-memory SQLite database.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

from warden.core.database.entities import CharacterSheet, User
from warden.core.database.utils import create_all


@pytest_asyncio.fixture
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(in_memory_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(in_memory_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def in_memory_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(in_memory_session: AsyncSession) -> User:
    user = User(username="alice", password="hash", email="alice@example.com")
    in_memory_session.add(user)
    await in_memory_session.commit()
    await in_memory_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def make_character(in_memory_session: AsyncSession):
    """Return a coroutine that stores a character sheet for a user."""

    async def _make(user_id: int, name: str, **fields) -> CharacterSheet:
        character = CharacterSheet(user_id=user_id, name=name, **fields)
        in_memory_session.add(character)
        await in_memory_session.commit()
        await in_memory_session.refresh(character)
        return character

    return _make
