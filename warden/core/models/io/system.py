"""
System status I/O models for API responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SystemHealth(BaseModel):
    status: str
    database: str
    bot: str
    version: str
    timestamp: datetime


class PasswordRotationStatus(BaseModel):
    """Database password rotation state.

    When no rotation has been recorded, the password is treated as overdue.
    """

    last_rotated: Optional[datetime] = None
    days_until_rotation: int = Field(ge=0)
    needs_rotation: bool
    overdue: bool
