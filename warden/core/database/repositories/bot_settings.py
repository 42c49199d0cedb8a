"""
Bot settings repository.

Data access for per-guild bot configuration, including the query the daily
prompt scheduler runs every minute.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, or_, select

from ..entities.bot_settings import BotSettings
from .base import AsyncCrudRepository


class BotSettingsRepository(AsyncCrudRepository[BotSettings]):
    """Repository for guild bot settings using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BotSettings)

    async def get_by_guild(self, guild_id: str) -> Optional[BotSettings]:
        """Get the settings row of a guild.

        Args:
            guild_id: Discord guild identifier

        Returns:
            BotSettings instance or None
        """
        stmt = select(BotSettings).where(BotSettings.guild_id == guild_id)
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def upsert(self, guild_id: str, **values: Any) -> BotSettings:
        """Create the guild's settings row or update the given columns.

        Args:
            guild_id: Discord guild identifier
            **values: Column values to set

        Returns:
            The persisted BotSettings
        """
        settings = await self.get_by_guild(guild_id)
        if settings is None:
            return await self.create(BotSettings(guild_id=guild_id, **values))
        for key, value in values.items():
            setattr(settings, key, value)
        return await self.update(settings)

    async def list_due_for_daily_prompt(self, current_time: str, day_start: datetime) -> List[BotSettings]:
        """List guilds whose daily prompt is due at ``current_time``.

        A guild is due when its daily prompt is enabled, its configured time
        equals ``current_time`` and it has not posted since ``day_start``.

        Args:
            current_time: Current minute formatted as ``HH:MM:00``
            day_start: Start of the current day as naive UTC

        Returns:
            Due BotSettings rows ordered by id
        """
        stmt = (
            select(BotSettings)
            .where(
                BotSettings.daily_prompt_enabled == True,  # noqa: E712
                BotSettings.daily_prompt_time == current_time,
                or_(
                    col(BotSettings.last_prompt_posted).is_(None),
                    col(BotSettings.last_prompt_posted) < day_start,
                ),
            )
            .order_by(col(BotSettings.id))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_prompt_posted(self, settings: BotSettings, posted_at: datetime) -> BotSettings:
        """Stamp the guild's ``last_prompt_posted``."""
        settings.last_prompt_posted = posted_at
        return await self.update(settings)
