"""
Character sheet entities.

This module contains the character sheet itself, the memories players record
for a character, and the mapping that ties a Discord channel to the
character a user is playing there.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Text
from sqlmodel import JSON, Field

from ..base import Base, utc_now


class CharacterSheetBase(Base):
    """Editable character sheet fields shared by the entity and the API schemas."""

    name: str = Field(max_length=255)

    # Ability scores
    strength: int = Field(default=10)
    dexterity: int = Field(default=10)
    constitution: int = Field(default=10)
    intelligence: int = Field(default=10)
    wisdom: int = Field(default=10)
    charisma: int = Field(default=10)

    # Identity
    character_class: Optional[str] = Field(default=None, max_length=100)
    level: int = Field(default=1)
    race: Optional[str] = Field(default=None, max_length=100)
    alignment: Optional[str] = Field(default=None, max_length=50)
    deity: Optional[str] = Field(default=None, max_length=100)
    size: str = Field(default="Medium", max_length=20)

    # Combat
    current_hp: int = Field(default=0)
    max_hp: int = Field(default=0)
    temp_hp: int = Field(default=0)
    armor_class: int = Field(default=10)
    touch_ac: int = Field(default=10)
    flat_footed_ac: int = Field(default=10)
    initiative: int = Field(default=0)
    speed: int = Field(default=30)
    base_attack_bonus: int = Field(default=0)
    cmb: int = Field(default=0)
    cmd: int = Field(default=10)

    # Saving throws
    fortitude_save: int = Field(default=0)
    reflex_save: int = Field(default=0)
    will_save: int = Field(default=0)

    # Structured sheet sections
    skills: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    weapons: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    armor: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    feats: List[Any] = Field(default_factory=list, sa_type=JSON)
    special_abilities: List[Any] = Field(default_factory=list, sa_type=JSON)
    spells: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    avatar_url: Optional[str] = Field(default=None, max_length=1024)

    # Biography
    full_name: Optional[str] = Field(default=None, sa_type=Text)
    titles: Optional[str] = Field(default=None, sa_type=Text)
    species: Optional[str] = Field(default=None, sa_type=Text)
    age_description: Optional[str] = Field(default=None, sa_type=Text)
    cultural_background: Optional[str] = Field(default=None, sa_type=Text)
    pronouns: Optional[str] = Field(default=None, sa_type=Text)
    gender_identity: Optional[str] = Field(default=None, sa_type=Text)
    sexuality: Optional[str] = Field(default=None, sa_type=Text)
    occupation: Optional[str] = Field(default=None, sa_type=Text)
    current_location: Optional[str] = Field(default=None, sa_type=Text)
    current_goal: Optional[str] = Field(default=None, sa_type=Text)
    long_term_desire: Optional[str] = Field(default=None, sa_type=Text)
    core_motivation: Optional[str] = Field(default=None, sa_type=Text)
    deepest_fear: Optional[str] = Field(default=None, sa_type=Text)
    core_belief: Optional[str] = Field(default=None, sa_type=Text)
    moral_code: Optional[str] = Field(default=None, sa_type=Text)
    personality_one_sentence: Optional[str] = Field(default=None, sa_type=Text)
    key_virtues: Optional[str] = Field(default=None, sa_type=Text)
    key_flaws: Optional[str] = Field(default=None, sa_type=Text)
    speech_style: Optional[str] = Field(default=None, sa_type=Text)
    physical_presence: Optional[str] = Field(default=None, sa_type=Text)
    identifying_traits: Optional[str] = Field(default=None, sa_type=Text)
    clothing_aesthetic: Optional[str] = Field(default=None, sa_type=Text)
    origin: Optional[str] = Field(default=None, sa_type=Text)
    greatest_success: Optional[str] = Field(default=None, sa_type=Text)
    greatest_failure: Optional[str] = Field(default=None, sa_type=Text)
    important_relationships: Optional[str] = Field(default=None, sa_type=Text)
    rival: Optional[str] = Field(default=None, sa_type=Text)
    affiliated_groups: Optional[str] = Field(default=None, sa_type=Text)
    public_facade: Optional[str] = Field(default=None, sa_type=Text)
    hidden_aspect: Optional[str] = Field(default=None, sa_type=Text)
    secret: Optional[str] = Field(default=None, sa_type=Text)
    legacy: Optional[str] = Field(default=None, sa_type=Text)


class CharacterSheet(CharacterSheetBase, table=True):
    """Persistent character sheet owned by a user.

    Table: character_sheets
    """

    __tablename__ = "character_sheets"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    # Public sharing
    is_public: bool = Field(default=False)
    public_slug: Optional[str] = Field(default=None, max_length=255, unique=True)
    public_views: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())

    def __repr__(self) -> str:
        return f"CharacterSheet(id={self.id}, name={self.name}, user_id={self.user_id})"


class CharacterMemory(Base, table=True):
    """Entity for things a character remembers, added from the web or Discord.

    Table: character_memories
    """

    __tablename__ = "character_memories"

    id: Optional[int] = Field(default=None, primary_key=True)
    character_id: int = Field(foreign_key="character_sheets.id", ondelete="CASCADE", index=True)
    guild_id: str = Field(max_length=255)
    memory: str = Field(sa_type=Text)
    added_by: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())


class ChannelCharacterMapping(Base, table=True):
    """Entity tying a Discord channel to the character a user plays there.

    Table: channel_character_mappings
    """

    __tablename__ = "channel_character_mappings"

    id: Optional[int] = Field(default=None, primary_key=True)
    channel_id: str = Field(max_length=255, index=True)
    guild_id: str = Field(max_length=255)
    character_id: int = Field(foreign_key="character_sheets.id", ondelete="CASCADE")
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
