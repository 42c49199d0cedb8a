"""
Character statistics and activity feed repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..base import utc_now
from ..entities.characters import CharacterSheet
from ..entities.stats import ActivityFeed, CharacterStats
from .base import AsyncCrudRepository

COUNTER_COLUMNS = {
    "total_messages": CharacterStats.total_messages,
    "total_dice_rolls": CharacterStats.total_dice_rolls,
    "nat20_count": CharacterStats.nat20_count,
    "nat1_count": CharacterStats.nat1_count,
    "total_damage_dealt": CharacterStats.total_damage_dealt,
}


def _summed(column):
    return func.coalesce(func.sum(column), 0)


class CharacterStatsRepository(AsyncCrudRepository[CharacterStats]):
    """Repository for per-guild character counters."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CharacterStats)

    async def get_for_guild(self, character_id: int, guild_id: str) -> Optional[CharacterStats]:
        stmt = select(CharacterStats).where(
            CharacterStats.character_id == character_id,
            CharacterStats.guild_id == guild_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def increment(
        self,
        character_id: int,
        guild_id: str,
        *,
        messages: int = 0,
        dice_rolls: int = 0,
        nat20s: int = 0,
        nat1s: int = 0,
        damage: int = 0,
        at: Optional[datetime] = None,
    ) -> CharacterStats:
        """Add to a character's counters in a guild, creating the row on first use."""
        stats = await self.get_for_guild(character_id, guild_id)
        if stats is None:
            stats = CharacterStats(character_id=character_id, guild_id=guild_id)
        stats.total_messages += messages
        stats.total_dice_rolls += dice_rolls
        stats.nat20_count += nat20s
        stats.nat1_count += nat1s
        stats.total_damage_dealt += damage
        stats.last_active = at or utc_now()
        self.session.add(stats)
        await self.session.commit()
        await self.session.refresh(stats)
        return stats

    async def totals_for_user(self, user_id: int) -> Dict[str, int]:
        """Sum every counter across all guilds and characters of a user."""
        stmt = (
            select(*(_summed(column).label(name) for name, column in COUNTER_COLUMNS.items()))
            .select_from(CharacterStats)
            .join(CharacterSheet, col(CharacterSheet.id) == col(CharacterStats.character_id))
            .where(CharacterSheet.user_id == user_id)
        )
        row = (await self.session.execute(stmt)).one()
        return {name: int(value) for name, value in row._mapping.items()}

    async def per_character_totals(self, user_id: int, character_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """Sum each of a user's characters' counters across guilds.

        Characters without any stats rows are included with zero counters.

        Returns:
            One dict per character with ``character_id``, ``character_name``
            and every counter, busiest character first
        """
        stmt = (
            select(
                col(CharacterSheet.id).label("character_id"),
                col(CharacterSheet.name).label("character_name"),
                *(_summed(column).label(name) for name, column in COUNTER_COLUMNS.items()),
            )
            .select_from(CharacterSheet)
            .outerjoin(CharacterStats, col(CharacterStats.character_id) == col(CharacterSheet.id))
            .where(CharacterSheet.user_id == user_id)
            .group_by(col(CharacterSheet.id), col(CharacterSheet.name))
            .order_by(_summed(CharacterStats.total_messages).desc(), col(CharacterSheet.id))
        )
        if character_id is not None:
            stmt = stmt.where(col(CharacterSheet.id) == character_id)
        result = await self.session.execute(stmt)
        return [dict(row._mapping) for row in result.all()]

    async def leaderboard(
        self, user_id: int, counter: str, since: Optional[datetime] = None, limit: int = 10
    ) -> List[Dict[str, Any]]:
        """Rank a user's characters by one summed counter.

        Args:
            user_id: Owner of the ranked characters
            counter: Key of ``COUNTER_COLUMNS`` to rank by
            since: Only count stats rows active at or after this time
            limit: Maximum number of characters
        """
        value = _summed(COUNTER_COLUMNS[counter])
        stmt = (
            select(
                col(CharacterSheet.id).label("character_id"),
                col(CharacterSheet.name).label("character_name"),
                col(CharacterSheet.avatar_url).label("avatar_url"),
                value.label("value"),
            )
            .select_from(CharacterStats)
            .join(CharacterSheet, col(CharacterSheet.id) == col(CharacterStats.character_id))
            .where(CharacterSheet.user_id == user_id)
            .group_by(col(CharacterSheet.id), col(CharacterSheet.name), col(CharacterSheet.avatar_url))
            .order_by(value.desc(), col(CharacterSheet.id))
            .limit(limit)
        )
        if since is not None:
            stmt = stmt.where(col(CharacterStats.last_active) >= since)
        result = await self.session.execute(stmt)
        return [dict(row._mapping) for row in result.all()]

    async def guild_leaderboard(self, guild_id: str, counter: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Rank every character with stats in a guild by one counter."""
        value = COUNTER_COLUMNS[counter]
        stmt = (
            select(
                col(CharacterSheet.id).label("character_id"),
                col(CharacterSheet.name).label("character_name"),
                value.label("value"),
            )
            .select_from(CharacterStats)
            .join(CharacterSheet, col(CharacterSheet.id) == col(CharacterStats.character_id))
            .where(CharacterStats.guild_id == guild_id)
            .order_by(col(value).desc(), col(CharacterSheet.id))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [dict(row._mapping) for row in result.all()]


class ActivityFeedRepository(AsyncCrudRepository[ActivityFeed]):
    """Repository for the character activity timeline."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ActivityFeed)

    async def add(
        self,
        character_id: int,
        activity_type: str,
        description: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActivityFeed:
        return await self.create(
            ActivityFeed(
                character_id=character_id,
                activity_type=activity_type,
                description=description,
                activity_metadata=metadata,
            )
        )

    async def recent(self, character_id: Optional[int] = None, limit: int = 50) -> List[ActivityFeed]:
        """List the newest activity, optionally for one character."""
        stmt = select(ActivityFeed).order_by(col(ActivityFeed.timestamp).desc(), col(ActivityFeed.id).desc())
        if character_id is not None:
            stmt = stmt.where(ActivityFeed.character_id == character_id)
        stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def recent_for_user(
        self, user_id: int, character_id: Optional[int] = None, limit: int = 50
    ) -> List[Tuple[ActivityFeed, str]]:
        """List the newest activity of a user's characters with each character's name."""
        stmt = (
            select(ActivityFeed, CharacterSheet.name)
            .join(CharacterSheet, col(CharacterSheet.id) == col(ActivityFeed.character_id))
            .where(CharacterSheet.user_id == user_id)
            .order_by(col(ActivityFeed.timestamp).desc(), col(ActivityFeed.id).desc())
            .limit(limit)
        )
        if character_id is not None:
            stmt = stmt.where(col(ActivityFeed.character_id) == character_id)
        result = await self.session.execute(stmt)
        return [(activity, name) for activity, name in result.all()]
