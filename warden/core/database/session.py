"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used by the API, the Discord bot and the prompt scheduler.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.logging_config import get_logger
from warden.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    Creates missing tables from the SQLModel metadata when
    ``WARDEN_DB_AUTO_CREATE`` is enabled. Deployments that run the Alembic
    migrations set it to false and this function does nothing.
    """
    if not settings.db_auto_create:
        logger.info("Automatic table creation disabled; relying on Alembic migrations")
        return
    await create_all(engine)
    logger.info("Database tables created from ORM metadata")
