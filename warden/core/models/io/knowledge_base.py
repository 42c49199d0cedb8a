"""
Knowledge base I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class KnowledgeBaseCreate(BaseModel):
    """Schema for adding a knowledge base entry from the web."""

    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    answer_html: Optional[str] = None
    source_url: Optional[str] = None
    category: Optional[str] = None


class KnowledgeBaseUpdate(BaseModel):
    question: Optional[str] = Field(default=None, min_length=1)
    answer: Optional[str] = Field(default=None, min_length=1)
    answer_html: Optional[str] = None
    source_url: Optional[str] = None
    category: Optional[str] = None


class KnowledgeBaseRead(BaseModel):
    """Schema for reading a knowledge base entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    guild_id: str
    question: str
    answer: str
    answer_html: Optional[str] = None
    source_url: Optional[str] = None
    category: Optional[str] = None
    ai_generated: bool
    created_by: Optional[str] = None
    upvotes: int
    created_at: datetime
    updated_at: datetime


class KnowledgeBasePage(BaseModel):
    """One page of knowledge base search results."""

    entries: List[KnowledgeBaseRead]
    total: int
    limit: int
    offset: int


class CategoryCount(BaseModel):
    category: str
    count: int


class KnowledgeBaseStats(BaseModel):
    total: int
    ai_generated: int
    manual: int
    categories: List[CategoryCount]
