"""
Character statistics I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StatsRecord(BaseModel):
    """Schema for recording activity against a character in a guild.

    Counters are added to the existing totals.
    """

    character_id: int
    guild_id: str = Field(min_length=1)
    messages: int = Field(default=0, ge=0)
    dice_rolls: int = Field(default=0, ge=0)
    nat20s: int = Field(default=0, ge=0)
    nat1s: int = Field(default=0, ge=0)
    damage: int = Field(default=0, ge=0)
    activity_type: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class CharacterStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    character_id: int
    guild_id: str
    total_messages: int
    total_dice_rolls: int
    nat20_count: int
    nat1_count: int
    total_damage_dealt: int
    last_active: datetime


class StatsOverview(BaseModel):
    """Summed counters across all of the user's characters."""

    character_count: int
    total_messages: int
    total_dice_rolls: int
    nat20_count: int
    nat1_count: int
    total_damage_dealt: int


class LeaderboardEntry(BaseModel):
    character_id: int
    character_name: str
    avatar_url: Optional[str] = None
    value: int


class ActivityRead(BaseModel):
    id: int
    character_id: int
    character_name: str
    activity_type: str
    description: str
    metadata: Optional[Dict[str, Any]] = None
    timestamp: datetime


class CharacterComparison(BaseModel):
    """Counters of one character with its crit and fail rates in percent."""

    character_id: int
    character_name: str
    total_messages: int
    total_dice_rolls: int
    nat20_count: int
    nat1_count: int
    total_damage_dealt: int
    crit_rate: float
    fail_rate: float


class DamageDistribution(BaseModel):
    character_id: int
    character_name: str
    total_damage: int
    total_dice_rolls: int
    avg_damage_per_roll: float


class StatsRecordResult(BaseModel):
    stats: CharacterStatsRead
    activity_id: Optional[int] = None


class LeaderboardResponse(BaseModel):
    metric: str
    timeframe: str
    entries: List[LeaderboardEntry]
