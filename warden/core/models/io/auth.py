"""
Authentication I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for registering a new account."""

    username: str = Field(description="Login name, 3-50 characters")
    password: str = Field(description="At least 8 characters with upper, lower, digit and special characters")
    email: Optional[str] = Field(default=None, description="Contact email address")


class LoginRequest(BaseModel):
    """Schema for logging in with username and password."""

    username: str
    password: str


class UserRead(BaseModel):
    """Schema for reading the authenticated user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: Optional[str] = None
    is_admin: bool
    discord_user_id: Optional[str] = None
    created_at: datetime


class DiscordSettings(BaseModel):
    """Schema for reading and linking the account's Discord user id."""

    discord_user_id: Optional[str] = Field(default=None, description="Discord user snowflake, null to unlink")


class CsrfToken(BaseModel):
    csrf_token: str
