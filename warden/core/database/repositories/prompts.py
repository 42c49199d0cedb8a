"""
Prompt, trope and prompt schedule repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..base import utc_now
from ..entities.prompts import Prompt, PromptSchedule, Trope
from .base import AsyncCrudRepository


class PromptRepository(AsyncCrudRepository[Prompt]):
    """Repository for roleplay prompts using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Prompt)

    async def list_by_category(self, category: Optional[str] = None) -> List[Prompt]:
        """List prompts newest first, optionally restricted to one category."""
        stmt = select(Prompt).order_by(col(Prompt.created_at).desc(), col(Prompt.id).desc())
        if category:
            stmt = stmt.where(Prompt.category == category)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_random(self, category: Optional[str] = None) -> Optional[Prompt]:
        """Pick one prompt at random.

        Args:
            category: Optional category to pick from

        Returns:
            A random Prompt, or None when no prompt matches
        """
        stmt = select(Prompt).order_by(func.random()).limit(1)
        if category:
            stmt = stmt.where(Prompt.category == category)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def record_use(self, prompt: Prompt, used_at: Optional[datetime] = None) -> Prompt:
        """Increment the prompt's use count in the database and stamp ``last_used``."""
        await self.session.execute(
            update(Prompt)
            .where(col(Prompt.id) == prompt.id)
            .values(use_count=col(Prompt.use_count) + 1, last_used=used_at or utc_now())
        )
        await self.session.commit()
        await self.session.refresh(prompt)
        return prompt

    async def category_summary(self) -> List[Tuple[str, int, int]]:
        """Count prompts and total uses per category.

        Returns:
            ``(category, count, total_uses)`` tuples ordered by category
        """
        stmt = (
            select(
                Prompt.category,
                func.count(col(Prompt.id)),
                func.coalesce(func.sum(Prompt.use_count), 0),
            )
            .group_by(Prompt.category)
            .order_by(Prompt.category)
        )
        result = await self.session.execute(stmt)
        return [(category, int(count), int(total)) for category, count, total in result.all()]

    async def most_used(self, limit: int = 10) -> List[Prompt]:
        """List the most used prompts."""
        stmt = select(Prompt).order_by(col(Prompt.use_count).desc(), col(Prompt.id)).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class TropeRepository(AsyncCrudRepository[Trope]):
    """Repository for character tropes using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Trope)

    async def list_by_category(self, category: Optional[str] = None) -> List[Trope]:
        stmt = select(Trope).order_by(col(Trope.name))
        if category:
            stmt = stmt.where(Trope.category == category)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_random(self, category: Optional[str] = None) -> Optional[Trope]:
        stmt = select(Trope).order_by(func.random()).limit(1)
        if category:
            stmt = stmt.where(Trope.category == category)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def record_use(self, trope: Trope) -> Trope:
        await self.session.execute(
            update(Trope).where(col(Trope.id) == trope.id).values(use_count=col(Trope.use_count) + 1)
        )
        await self.session.commit()
        await self.session.refresh(trope)
        return trope

    async def category_summary(self) -> List[Tuple[str, int, int]]:
        stmt = (
            select(
                Trope.category,
                func.count(col(Trope.id)),
                func.coalesce(func.sum(Trope.use_count), 0),
            )
            .group_by(Trope.category)
            .order_by(Trope.category)
        )
        result = await self.session.execute(stmt)
        return [(category, int(count), int(total)) for category, count, total in result.all()]

    async def most_used(self, limit: int = 10) -> List[Trope]:
        stmt = select(Trope).order_by(col(Trope.use_count).desc(), col(Trope.id)).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class PromptScheduleRepository(AsyncCrudRepository[PromptSchedule]):
    """Repository for scheduled prompt slots."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromptSchedule)

    async def list_for_guild(self, guild_id: Optional[str] = None) -> List[PromptSchedule]:
        stmt = select(PromptSchedule).order_by(col(PromptSchedule.schedule_time))
        if guild_id:
            stmt = stmt.where(PromptSchedule.guild_id == guild_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
