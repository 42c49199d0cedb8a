"""
Character sheet I/O models for API requests and responses.

Create and update payloads reuse the editable columns declared on
``CharacterSheetBase`` so the API and the table never drift apart.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlmodel import Field

from warden.core.database.entities.characters import CharacterSheet, CharacterSheetBase
from warden.core.models.domain import RollType, ability_modifiers


class CharacterCreate(CharacterSheetBase):
    """Schema for creating a character sheet."""


class CharacterUpdate(CharacterSheetBase):
    """Schema for updating a character sheet.

    Only the fields present in the request body are applied.
    """

    name: Optional[str] = Field(default=None, max_length=255)


class CharacterRead(CharacterSheetBase):
    """Schema for reading a character sheet with its ability modifiers."""

    id: int
    user_id: int
    is_public: bool
    public_slug: Optional[str] = None
    public_views: int
    created_at: datetime
    updated_at: datetime
    modifiers: Dict[str, int] = Field(default_factory=dict, description="Ability modifiers keyed by ability name")

    @classmethod
    def from_entity(cls, sheet: CharacterSheet) -> "CharacterRead":
        return cls(**sheet.model_dump(), modifiers=ability_modifiers(sheet))


class PublicCharacterRead(CharacterSheetBase):
    """Schema for a character's public profile.

    Fields that describe a character's secrets are never published.
    """

    id: int
    public_slug: Optional[str] = None
    public_views: int
    modifiers: Dict[str, int] = Field(default_factory=dict)
    secret: Optional[str] = Field(default=None, exclude=True)
    hidden_aspect: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def from_entity(cls, sheet: CharacterSheet) -> "PublicCharacterRead":
        return cls(**sheet.model_dump(), modifiers=ability_modifiers(sheet))


class CharacterSummary(BaseModel):
    """Compact character listing used by public and Discord endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    character_class: Optional[str] = None
    level: int
    race: Optional[str] = None
    avatar_url: Optional[str] = None
    public_slug: Optional[str] = None
    public_views: int = 0


class RollRequest(BaseModel):
    """Schema for rolling a d20 against a character sheet."""

    stat: Optional[str] = PydanticField(default=None, description="Ability name, or fortitude/reflex/will for saves")
    roll_type: RollType = PydanticField(default=RollType.ability)
    skill_name: Optional[str] = PydanticField(default=None, description="Skill key for skill checks")


class RollResponse(BaseModel):
    """Schema for a resolved roll."""

    character_id: int
    character_name: str
    description: str
    dice_roll: int
    rolls: List[int]
    modifier: int
    total: int
    natural_20: bool
    natural_1: bool


class PublicToggle(BaseModel):
    is_public: bool


class PublicStatus(BaseModel):
    """Schema for a character's public sharing state."""

    is_public: bool
    public_slug: Optional[str] = None
    public_url: Optional[str] = None


class MemoryCreate(BaseModel):
    """Schema for recording a character memory."""

    memory: str = PydanticField(min_length=1)
    guild_id: str = PydanticField(default="web", description="Guild the memory belongs to, 'web' for the site")


class MemoryUpdate(BaseModel):
    memory: str = PydanticField(min_length=1)


class MemoryRead(BaseModel):
    """Schema for reading a character memory."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    character_id: int
    guild_id: str
    memory: str
    added_by: Optional[str] = None
    created_at: datetime
