"""
User repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..entities.characters import CharacterSheet
from ..entities.documents import Document
from ..entities.users import User
from .base import AsyncCrudRepository


class UserRepository(AsyncCrudRepository[User]):
    """Repository for user accounts using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username, ignoring case."""
        stmt = select(User).where(func.lower(User.username) == username.lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_discord_id(self, discord_user_id: str) -> Optional[User]:
        """Get the account a Discord user is linked to."""
        stmt = select(User).where(User.discord_user_id == discord_user_id)
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def list_with_counts(self) -> List[Tuple[User, int, int]]:
        """List users newest first with their character and document counts.

        Returns:
            ``(user, character_count, document_count)`` tuples
        """
        characters = (
            select(func.count(col(CharacterSheet.id)))
            .where(col(CharacterSheet.user_id) == col(User.id))
            .scalar_subquery()
        )
        documents = (
            select(func.count(col(Document.id))).where(col(Document.user_id) == col(User.id)).scalar_subquery()
        )
        stmt = select(User, characters, documents).order_by(col(User.created_at).desc(), col(User.id).desc())
        result = await self.session.execute(stmt)
        return [(user, int(character_count), int(document_count)) for user, character_count, document_count in result.all()]

    async def delete_with_content(self, user: User) -> None:
        """Delete a user along with their characters and documents."""
        await self.session.execute(sa_delete(CharacterSheet).where(col(CharacterSheet.user_id) == user.id))
        await self.session.execute(sa_delete(Document).where(col(Document.user_id) == user.id))
        await self.session.delete(user)
        await self.session.commit()
