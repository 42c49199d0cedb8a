"""
Character sheet, memory and channel mapping repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.characters import ChannelCharacterMapping, CharacterMemory, CharacterSheet
from .base import AsyncCrudRepository


class CharacterRepository(AsyncCrudRepository[CharacterSheet]):
    """Repository for character sheets using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CharacterSheet)

    async def list_for_user(self, user_id: int) -> List[CharacterSheet]:
        """List a user's characters, most recently updated first."""
        stmt = (
            select(CharacterSheet)
            .where(CharacterSheet.user_id == user_id)
            .order_by(col(CharacterSheet.updated_at).desc(), col(CharacterSheet.id).desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_user(self, character_id: int, user_id: int) -> Optional[CharacterSheet]:
        """Get a character only if ``user_id`` owns it."""
        stmt = select(CharacterSheet).where(
            CharacterSheet.id == character_id,
            CharacterSheet.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def find_by_name(self, user_id: int, name: str, partial: bool = False) -> Optional[CharacterSheet]:
        """Find one of a user's characters by name, ignoring case.

        With ``partial`` the name may appear anywhere in the character's name.
        """
        wanted = name.strip().lower()
        lowered = func.lower(CharacterSheet.name)
        matches = lowered.contains(wanted, autoescape=True) if partial else lowered == wanted
        stmt = (
            select(CharacterSheet)
            .where(CharacterSheet.user_id == user_id, matches)
            .order_by(col(CharacterSheet.id))
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_public_by_slug(self, slug: str) -> Optional[CharacterSheet]:
        stmt = select(CharacterSheet).where(
            CharacterSheet.public_slug == slug,
            CharacterSheet.is_public == True,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def slug_in_use(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(col(CharacterSheet.id)).where(CharacterSheet.public_slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(col(CharacterSheet.id) != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def list_public(self, limit: int = 50) -> List[CharacterSheet]:
        """List public characters, most viewed first."""
        stmt = (
            select(CharacterSheet)
            .where(CharacterSheet.is_public == True)  # noqa: E712
            .order_by(col(CharacterSheet.public_views).desc(), col(CharacterSheet.id))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class CharacterMemoryRepository(AsyncCrudRepository[CharacterMemory]):
    """Repository for character memories."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CharacterMemory)

    async def list_for_character(self, character_id: int) -> List[CharacterMemory]:
        stmt = (
            select(CharacterMemory)
            .where(CharacterMemory.character_id == character_id)
            .order_by(col(CharacterMemory.created_at).desc(), col(CharacterMemory.id).desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ChannelMappingRepository(AsyncCrudRepository[ChannelCharacterMapping]):
    """Repository for channel to character mappings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChannelCharacterMapping)

    async def get_for_channel(self, guild_id: str, channel_id: str, user_id: int) -> Optional[ChannelCharacterMapping]:
        stmt = select(ChannelCharacterMapping).where(
            ChannelCharacterMapping.guild_id == guild_id,
            ChannelCharacterMapping.channel_id == channel_id,
            ChannelCharacterMapping.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_character(self, character_id: int) -> List[ChannelCharacterMapping]:
        stmt = select(ChannelCharacterMapping).where(ChannelCharacterMapping.character_id == character_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def assign(self, guild_id: str, channel_id: str, user_id: int, character_id: int) -> ChannelCharacterMapping:
        """Map the user's character in a channel, replacing a previous mapping."""
        mapping = await self.get_for_channel(guild_id, channel_id, user_id)
        if mapping is None:
            return await self.create(
                ChannelCharacterMapping(
                    guild_id=guild_id, channel_id=channel_id, user_id=user_id, character_id=character_id
                )
            )
        mapping.character_id = character_id
        return await self.update(mapping)
