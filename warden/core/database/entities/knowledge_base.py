"""
Knowledge base entity.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field

from ..base import Base, utc_now


class KnowledgeBaseEntry(Base, table=True):
    """Entity for rules questions and their answers.

    Entries created from the web use the guild id ``web``.

    Table: knowledge_base
    """

    __tablename__ = "knowledge_base"

    id: Optional[int] = Field(default=None, primary_key=True)
    guild_id: str = Field(max_length=255, index=True)
    question: str = Field(sa_type=Text)
    answer: str = Field(sa_type=Text)
    answer_html: Optional[str] = Field(default=None, sa_type=Text)
    source_url: Optional[str] = Field(default=None, max_length=1024)
    category: Optional[str] = Field(default=None, max_length=100, index=True)
    ai_generated: bool = Field(default=False)
    created_by: Optional[str] = Field(default=None, max_length=255)
    upvotes: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
