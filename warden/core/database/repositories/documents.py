"""
Document and stored file repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from ..base import utc_now
from ..entities.documents import Document, StoredFile
from ..entities.users import User
from .base import AsyncCrudRepository


class DocumentRepository(AsyncCrudRepository[Document]):
    """Repository for the per-user document tree."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Document)

    async def list_children(self, user_id: int, parent_id: Optional[int] = None) -> List[Document]:
        """List a folder's contents, folders first then by name. ``None`` lists the root."""
        stmt = select(Document).where(Document.user_id == user_id)
        if parent_id is None:
            stmt = stmt.where(col(Document.parent_id).is_(None))
        else:
            stmt = stmt.where(Document.parent_id == parent_id)
        stmt = stmt.order_by(col(Document.is_folder).desc(), col(Document.name))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_user(self, document_id: int, user_id: int) -> Optional[Document]:
        stmt = select(Document).where(Document.id == document_id, Document.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def is_within(self, document: Document, folder_id: Optional[int]) -> bool:
        """Whether ``folder_id`` is ``document`` itself or lies somewhere below it."""
        seen = set()
        while folder_id is not None and folder_id not in seen:
            if folder_id == document.id:
                return True
            seen.add(folder_id)
            folder = await self.get_by_id(folder_id)
            folder_id = folder.parent_id if folder is not None else None
        return False

    async def delete_tree(self, document: Document) -> int:
        """Delete a document, or a folder with everything below it.

        Returns:
            Number of rows deleted
        """
        doomed = [document]
        pending = [document]
        seen = {document.id}
        while pending:
            current = pending.pop()
            if not current.is_folder:
                continue
            children = await self.list_children(current.user_id, current.id)
            children = [child for child in children if child.id not in seen]
            seen.update(child.id for child in children)
            doomed.extend(children)
            pending.extend(children)

        # Deepest rows first so no row outlives its parent
        for doc in reversed(doomed):
            await self.session.delete(doc)
        await self.session.commit()
        return len(doomed)


class StoredFileRepository(AsyncCrudRepository[StoredFile]):
    """Repository for stored file metadata."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StoredFile)

    async def list_active_for_user(self, user_id: int, category: Optional[str] = None) -> List[StoredFile]:
        """List a user's files that are not soft-deleted, newest first."""
        stmt = (
            select(StoredFile)
            .where(StoredFile.user_id == user_id, col(StoredFile.deleted_at).is_(None))
            .order_by(col(StoredFile.uploaded_at).desc(), col(StoredFile.id).desc())
        )
        if category:
            stmt = stmt.where(StoredFile.category == category)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_for_user(self, file_id: int, user_id: int) -> Optional[StoredFile]:
        stmt = select(StoredFile).where(
            StoredFile.id == file_id,
            StoredFile.user_id == user_id,
            col(StoredFile.deleted_at).is_(None),
        )
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def soft_delete(self, stored_file: StoredFile, owner: User) -> StoredFile:
        """Mark a file deleted and release its size from the owner's storage usage."""
        stored_file.deleted_at = utc_now()
        owner.storage_used_bytes = max(0, owner.storage_used_bytes - stored_file.file_size)
        self.session.add(stored_file)
        self.session.add(owner)
        await self.session.commit()
        await self.session.refresh(stored_file)
        return stored_file
