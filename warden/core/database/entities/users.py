"""
User account entity.

Accounts own character sheets, documents and files. A Discord user can be
linked to one account through ``discord_user_id`` so bot commands act on
that account's characters.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime
from sqlmodel import Field

from ..base import Base, utc_now

DEFAULT_STORAGE_QUOTA_BYTES = 1024 * 1024 * 1024


class User(Base, table=True):
    """Entity for registered user accounts.

    Table: users
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=255, unique=True, index=True)
    password: str = Field(max_length=255, description="bcrypt hash")
    email: Optional[str] = Field(default=None, max_length=255)
    is_admin: bool = Field(default=False)
    discord_user_id: Optional[str] = Field(default=None, max_length=255, unique=True, index=True)

    storage_quota_bytes: int = Field(default=DEFAULT_STORAGE_QUOTA_BYTES, sa_type=BigInteger)
    storage_used_bytes: int = Field(default=0, sa_type=BigInteger)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username})"
