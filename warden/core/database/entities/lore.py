"""
Guild lore entities.

Lore entries are free-text notes grouped by tag. A channel can be linked to
one tag so ``!lore`` in that channel shows the matching entries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text, UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now


class LoreEntry(Base, table=True):
    """Entity for tagged lore notes.

    Table: lore_entries
    """

    __tablename__ = "lore_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    guild_id: str = Field(max_length=255, index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
    tag: str = Field(max_length=100, index=True)
    content: str = Field(sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())


class ChannelLoreTag(Base, table=True):
    """Entity linking a guild channel to a lore tag.

    Table: channel_lore_tags
    """

    __tablename__ = "channel_lore_tags"
    __table_args__ = (UniqueConstraint("guild_id", "channel_id", name="uq_channel_lore_tags_guild_channel"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    guild_id: str = Field(max_length=255)
    channel_id: str = Field(max_length=255)
    tag: str = Field(max_length=100)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
