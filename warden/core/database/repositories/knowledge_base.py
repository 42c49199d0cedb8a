"""
Knowledge base repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.knowledge_base import KnowledgeBaseEntry
from .base import AsyncCrudRepository

UNCATEGORIZED = "Uncategorized"


class KnowledgeBaseRepository(AsyncCrudRepository[KnowledgeBaseEntry]):
    """Repository for knowledge base entries using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, KnowledgeBaseEntry)

    @staticmethod
    def _conditions(search: Optional[str], category: Optional[str], ai_generated: Optional[bool]) -> list:
        conditions = []
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(KnowledgeBaseEntry.question).like(pattern),
                    func.lower(KnowledgeBaseEntry.answer).like(pattern),
                )
            )
        if category:
            conditions.append(col(KnowledgeBaseEntry.category) == category)
        if ai_generated is not None:
            conditions.append(col(KnowledgeBaseEntry.ai_generated) == ai_generated)
        return conditions

    async def search(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        ai_generated: Optional[bool] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[KnowledgeBaseEntry], int]:
        """Search entries newest first.

        ``search`` matches question or answer text, ignoring case.

        Returns:
            The requested page of entries and the total number of matches
        """
        conditions = self._conditions(search, category, ai_generated)

        stmt = (
            select(KnowledgeBaseEntry)
            .where(*conditions)
            .order_by(col(KnowledgeBaseEntry.created_at).desc(), col(KnowledgeBaseEntry.id).desc())
            .limit(limit)
            .offset(offset)
        )
        entries = list((await self.session.execute(stmt)).scalars().all())

        count_stmt = select(func.count(col(KnowledgeBaseEntry.id))).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return entries, int(total)

    async def summary(self) -> Tuple[int, int, List[Tuple[str, int]]]:
        """Count entries overall, AI generated, and per category (largest first)."""
        total = (await self.session.execute(select(func.count(col(KnowledgeBaseEntry.id))))).scalar_one()
        ai_generated = (
            await self.session.execute(
                select(func.count(col(KnowledgeBaseEntry.id))).where(col(KnowledgeBaseEntry.ai_generated) == True)  # noqa: E712
            )
        ).scalar_one()

        category = func.coalesce(KnowledgeBaseEntry.category, UNCATEGORIZED)
        stmt = (
            select(category, func.count(col(KnowledgeBaseEntry.id)).label("count"))
            .group_by(category)
            .order_by(func.count(col(KnowledgeBaseEntry.id)).desc(), category)
        )
        categories = [(name, int(count)) for name, count in (await self.session.execute(stmt)).all()]
        return int(total), int(ai_generated), categories
