"""
Prompt, trope and prompt schedule I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from warden.core.models.domain import PromptCategory, TropeCategory, normalize_prompt_time


class PromptCreate(BaseModel):
    """Schema for creating or replacing a prompt."""

    category: PromptCategory
    prompt_text: str = Field(min_length=1)


class PromptRead(BaseModel):
    """Schema for reading a prompt."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    prompt_text: str
    use_count: int
    last_used: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: datetime


class TropeCreate(BaseModel):
    """Schema for creating or replacing a trope."""

    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    category: TropeCategory


class TropeRead(BaseModel):
    """Schema for reading a trope."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str
    use_count: int
    created_at: datetime


class CategorySummary(BaseModel):
    """Count and total uses of one category."""

    category: str
    count: int
    total_uses: int


class ScheduleCreate(BaseModel):
    """Schema for adding a scheduled prompt slot."""

    guild_id: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    schedule_time: str = Field(description="24h time, HH:MM")
    category: Optional[PromptCategory] = None
    is_active: bool = True

    @field_validator("schedule_time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return normalize_prompt_time(value)


class ScheduleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    guild_id: str
    channel_id: str
    schedule_time: str
    category: Optional[str] = None
    is_active: bool
    created_at: datetime
