"""
Document and stored file I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FolderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    parent_id: Optional[int] = None


class DocumentCreate(BaseModel):
    """Schema for creating a text document."""

    name: str = Field(min_length=1, max_length=255)
    content: str = ""
    parent_id: Optional[int] = None
    mime_type: str = "text/plain"


class DocumentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    parent_id: Optional[int] = None


class DocumentRead(BaseModel):
    """Schema for reading a document or folder."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    content: Optional[str] = None
    user_id: int
    parent_id: Optional[int] = None
    is_folder: bool
    mime_type: Optional[str] = None
    size: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class StoredFileRead(BaseModel):
    """Schema for reading stored file metadata."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    file_name: str
    original_file_name: str
    mime_type: str
    file_size: int
    document_id: Optional[int] = None
    virus_scan_status: str
    category: Optional[str] = None
    uploaded_at: datetime


class StorageQuota(BaseModel):
    used: int
    total: int
    used_mb: float
    total_mb: float
    percent_used: int


class FileListing(BaseModel):
    files: List[StoredFileRead]
    quota: StorageQuota
