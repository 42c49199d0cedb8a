"""
I/O models for the endpoints called by the Discord bot.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .characters import CharacterSummary


class DiscordLoginRequest(BaseModel):
    """Schema for linking a Discord user to an account by its credentials."""

    discord_user_id: str = Field(min_length=1)
    username: str
    password: str


class DiscordUserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: Optional[str] = None
    discord_user_id: Optional[str] = None


class DiscordLoginResponse(BaseModel):
    success: bool = True
    user: DiscordUserRead
    characters: List[CharacterSummary]


class DiscordCharacterRead(CharacterSummary):
    """A linked user's character with its ability scores."""

    strength: int
    dexterity: int
    constitution: int
    intelligence: int
    wisdom: int
    charisma: int
    current_hp: int
    max_hp: int
    armor_class: int
    fortitude_save: int
    reflex_save: int
    will_save: int


class DiscordUserCharacters(BaseModel):
    user: DiscordUserRead
    characters: List[DiscordCharacterRead]


class ChannelMappingSet(BaseModel):
    """Schema for choosing which character a user plays in a channel."""

    discord_user_id: str = Field(min_length=1)
    character_id: int


class ChannelMappingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    channel_id: str
    guild_id: str
    character_id: int
    user_id: int
