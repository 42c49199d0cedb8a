"""
Lore I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoreEntryCreate(BaseModel):
    """Schema for adding a lore entry to a guild."""

    guild_id: str = Field(min_length=1)
    tag: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1)


class LoreEntryRead(BaseModel):
    """Schema for reading a lore entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    guild_id: str
    user_id: Optional[int] = None
    tag: str
    content: str
    created_at: datetime


class ChannelTagSet(BaseModel):
    """Schema for linking a channel to a lore tag."""

    guild_id: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    tag: str = Field(min_length=1, max_length=100)


class ChannelTagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    guild_id: str
    channel_id: str
    tag: str
