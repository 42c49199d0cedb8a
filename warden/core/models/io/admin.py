"""
Administration I/O models for API responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AdminUserRead(BaseModel):
    """A user account with its ownership counts."""

    id: int
    username: str
    email: Optional[str] = None
    is_admin: bool
    discord_user_id: Optional[str] = None
    created_at: datetime
    character_count: int
    document_count: int


class AdminUserDetail(AdminUserRead):
    storage_quota_bytes: int
    storage_used_bytes: int
    file_count: int


class AdminStats(BaseModel):
    total_users: int
    admin_users: int
    total_characters: int
    public_characters: int
    total_documents: int
    total_files: int
    total_prompts: int
    total_lore_entries: int


class MessageResponse(BaseModel):
    success: bool = True
    message: str
