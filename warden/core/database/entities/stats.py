"""
Character activity statistics entities.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, JSON, Text, UniqueConstraint
from sqlmodel import Field

from ..base import Base, utc_now


class CharacterStats(Base, table=True):
    """Per-character, per-guild activity counters.

    Table: character_stats
    """

    __tablename__ = "character_stats"
    __table_args__ = (UniqueConstraint("character_id", "guild_id", name="uq_character_stats_character_guild"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    character_id: int = Field(foreign_key="character_sheets.id", ondelete="CASCADE", index=True)
    guild_id: str = Field(max_length=255)
    total_messages: int = Field(default=0)
    total_dice_rolls: int = Field(default=0)
    nat20_count: int = Field(default=0)
    nat1_count: int = Field(default=0)
    total_damage_dealt: int = Field(default=0)
    last_active: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())


class ActivityFeed(Base, table=True):
    """Timeline of character activity such as rolls, crits and messages.

    Table: activity_feed
    """

    __tablename__ = "activity_feed"

    id: Optional[int] = Field(default=None, primary_key=True)
    character_id: int = Field(foreign_key="character_sheets.id", ondelete="CASCADE", index=True)
    activity_type: str = Field(max_length=50)
    description: str = Field(sa_type=Text)
    # "metadata" is reserved on declarative models, so the attribute is renamed
    activity_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column("metadata", JSON))
    timestamp: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime())
