"""
Lore repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.lore import ChannelLoreTag, LoreEntry
from .base import AsyncCrudRepository


class LoreRepository(AsyncCrudRepository[LoreEntry]):
    """Repository for guild lore entries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LoreEntry)

    async def list_for_guild(self, guild_id: str, tag: Optional[str] = None) -> List[LoreEntry]:
        """List a guild's lore newest first, optionally for a single tag."""
        stmt = (
            select(LoreEntry)
            .where(LoreEntry.guild_id == guild_id)
            .order_by(col(LoreEntry.created_at).desc(), col(LoreEntry.id).desc())
        )
        if tag:
            stmt = stmt.where(LoreEntry.tag == tag)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ChannelLoreTagRepository(AsyncCrudRepository[ChannelLoreTag]):
    """Repository for channel to lore tag links."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChannelLoreTag)

    async def get_for_channel(self, guild_id: str, channel_id: str) -> Optional[ChannelLoreTag]:
        stmt = select(ChannelLoreTag).where(
            ChannelLoreTag.guild_id == guild_id,
            ChannelLoreTag.channel_id == channel_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def set_tag(self, guild_id: str, channel_id: str, tag: str) -> ChannelLoreTag:
        """Link a channel to ``tag``, replacing any existing link."""
        await self.session.execute(
            sa_delete(ChannelLoreTag).where(
                col(ChannelLoreTag.guild_id) == guild_id,
                col(ChannelLoreTag.channel_id) == channel_id,
            )
        )
        return await self.create(ChannelLoreTag(guild_id=guild_id, channel_id=channel_id, tag=tag))
