"""
Document tree and stored file entities.

Documents form a per-user folder tree through ``parent_id``. Stored files
describe objects kept in S3; uploading them is handled outside this service,
so the API only lists and soft-deletes these rows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Text
from sqlmodel import Field

from ..base import Base, utc_now


class Document(Base, table=True):
    """Entity for user documents and folders.

    Table: documents
    """

    __tablename__ = "documents"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    content: Optional[str] = Field(default=None, sa_type=Text)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    parent_id: Optional[int] = Field(default=None, foreign_key="documents.id", ondelete="CASCADE", index=True)
    is_folder: bool = Field(default=False)
    mime_type: Optional[str] = Field(default=None, max_length=255)
    size: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())


class StoredFile(Base, table=True):
    """Entity for files stored in object storage.

    Table: files
    """

    __tablename__ = "files"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    file_name: str = Field(max_length=255)
    original_file_name: str = Field(max_length=255)
    mime_type: str = Field(max_length=255)
    file_size: int = Field(sa_type=BigInteger)
    s3_key: str = Field(max_length=1024, unique=True)
    s3_bucket: str = Field(max_length=255)
    document_id: Optional[int] = Field(default=None, foreign_key="documents.id", ondelete="SET NULL")
    virus_scan_status: str = Field(default="pending", max_length=20)
    category: Optional[str] = Field(default=None, max_length=50)
    uploaded_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    deleted_at: Optional[datetime] = Field(default=None, sa_type=DateTime())
