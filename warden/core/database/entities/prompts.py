"""
Roleplay prompt, trope and prompt schedule entities.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field

from ..base import Base, utc_now


class Prompt(Base, table=True):
    """Entity for roleplay writing prompts.

    ``use_count`` and ``last_used`` are bumped whenever the prompt is
    posted, by the scheduler or by the ``!prompt`` command.

    Table: prompts
    """

    __tablename__ = "prompts"

    id: Optional[int] = Field(default=None, primary_key=True)
    category: str = Field(max_length=50, index=True)
    prompt_text: str = Field(sa_type=Text)
    use_count: int = Field(default=0)
    last_used: Optional[datetime] = Field(default=None, sa_type=DateTime())
    created_by: Optional[int] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())

    def __repr__(self) -> str:
        return f"Prompt(id={self.id}, category={self.category})"


class Trope(Base, table=True):
    """Entity for character tropes used as inspiration.

    Table: tropes
    """

    __tablename__ = "tropes"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    description: str = Field(sa_type=Text)
    category: str = Field(max_length=50, index=True)
    use_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())

    def __repr__(self) -> str:
        return f"Trope(id={self.id}, name={self.name})"


class PromptSchedule(Base, table=True):
    """Entity for additional scheduled prompt slots per channel.

    Table: prompt_schedule
    """

    __tablename__ = "prompt_schedule"

    id: Optional[int] = Field(default=None, primary_key=True)
    guild_id: str = Field(max_length=255, index=True)
    channel_id: str = Field(max_length=255)
    schedule_time: str = Field(max_length=8, description="HH:MM:SS")
    category: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
