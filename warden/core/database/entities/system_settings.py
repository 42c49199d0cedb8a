"""
Key/value system settings entity.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field

from ..base import Base, utc_now


class SystemSetting(Base, table=True):
    """Entity for global key/value settings such as the password rotation stamp.

    Table: system_settings
    """

    __tablename__ = "system_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(max_length=255, unique=True, index=True)
    value: str = Field(sa_type=Text)
    description: Optional[str] = Field(default=None, sa_type=Text)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
