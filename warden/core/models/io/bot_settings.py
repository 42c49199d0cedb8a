"""
Guild bot settings I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from warden.core.models.domain import normalize_prompt_time


class BotSettingsRead(BaseModel):
    """Schema for reading a guild's bot settings."""

    model_config = ConfigDict(from_attributes=True)

    guild_id: str
    announcement_channel_id: Optional[str] = None
    daily_prompt_enabled: bool
    daily_prompt_channel_id: Optional[str] = None
    daily_prompt_time: str
    last_prompt_posted: Optional[datetime] = None


class BotSettingsUpdate(BaseModel):
    """Schema for changing a guild's bot settings.

    Omitted fields keep their current value.
    """

    announcement_channel_id: Optional[str] = None
    daily_prompt_enabled: Optional[bool] = None
    daily_prompt_channel_id: Optional[str] = None
    daily_prompt_time: Optional[str] = Field(default=None, description="24h time, HH:MM")

    @field_validator("daily_prompt_time")
    @classmethod
    def _normalize_time(cls, value: Optional[str]) -> Optional[str]:
        return normalize_prompt_time(value) if value is not None else None
