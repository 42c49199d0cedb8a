"""
Database layer for Warden.

SQLModel entities live in ``entities``, data access helpers in
``repositories``. The global engine and the request-scoped session
dependency live in ``session``.
"""

from .base import Base, utc_now
from .session import async_session_maker, engine, get_session, init_db

__all__ = ["Base", "utc_now", "async_session_maker", "engine", "get_session", "init_db"]
