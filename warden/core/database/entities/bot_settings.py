"""
Per-guild Discord bot settings.

One row per guild. The daily prompt scheduler reads the ``daily_prompt_*``
columns every minute and stamps ``last_prompt_posted`` after a successful
post, which keeps a guild to one prompt per day.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now

DEFAULT_DAILY_PROMPT_TIME = "09:00:00"


class BotSettings(Base, table=True):
    """Entity for guild-level bot configuration.

    Table: bot_settings
    """

    __tablename__ = "bot_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    guild_id: str = Field(max_length=255, unique=True, index=True)
    announcement_channel_id: Optional[str] = Field(default=None, max_length=255)

    daily_prompt_enabled: bool = Field(default=False)
    daily_prompt_channel_id: Optional[str] = Field(default=None, max_length=255)
    daily_prompt_time: str = Field(default=DEFAULT_DAILY_PROMPT_TIME, max_length=8, description="HH:MM:SS")
    last_prompt_posted: Optional[datetime] = Field(default=None, sa_type=DateTime())

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())

    def __repr__(self) -> str:
        return f"BotSettings(guild_id={self.guild_id}, daily_prompt_enabled={self.daily_prompt_enabled})"
