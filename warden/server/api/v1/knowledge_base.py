"""
Knowledge Base Endpoints.

Rules questions and answers collected from Discord and the web.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import KnowledgeBaseEntry
from warden.core.database.repositories import KnowledgeBaseRepository
from warden.core.models.io.knowledge_base import (
    CategoryCount,
    KnowledgeBaseCreate,
    KnowledgeBasePage,
    KnowledgeBaseRead,
    KnowledgeBaseStats,
    KnowledgeBaseUpdate,
)
from warden.server.services.deps import CurrentUser

router = APIRouter(tags=["knowledge-base"])

WEB_GUILD_ID = "web"


async def _get_entry(session: AsyncSession, entry_id: int) -> KnowledgeBaseEntry:
    entry = await KnowledgeBaseRepository(session).get_by_id(entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    return entry


@router.get(
    "",
    response_model=KnowledgeBasePage,
    summary="Search Knowledge Base",
    description="Search entries by text, category and origin, newest first.",
)
async def list_entries(
    user: CurrentUser,
    search: Optional[str] = None,
    category: Optional[str] = None,
    ai_generated: Optional[bool] = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> KnowledgeBasePage:
    entries, total = await KnowledgeBaseRepository(session).search(search, category, ai_generated, limit, offset)
    return KnowledgeBasePage(
        entries=[KnowledgeBaseRead.model_validate(entry) for entry in entries],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/stats",
    response_model=KnowledgeBaseStats,
    summary="Knowledge Base Stats",
)
async def entry_stats(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> KnowledgeBaseStats:
    total, ai_generated, categories = await KnowledgeBaseRepository(session).summary()
    return KnowledgeBaseStats(
        total=total,
        ai_generated=ai_generated,
        manual=total - ai_generated,
        categories=[CategoryCount(category=name, count=count) for name, count in categories],
    )


@router.get(
    "/{entry_id}",
    response_model=KnowledgeBaseRead,
    summary="Get Entry",
    responses={404: {"description": "Entry not found"}},
)
async def get_entry(
    entry_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> KnowledgeBaseRead:
    return KnowledgeBaseRead.model_validate(await _get_entry(session, entry_id))


@router.post(
    "",
    response_model=KnowledgeBaseRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Entry",
)
async def create_entry(
    payload: KnowledgeBaseCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> KnowledgeBaseRead:
    entry = KnowledgeBaseEntry(
        guild_id=WEB_GUILD_ID,
        ai_generated=False,
        created_by=str(user.id),
        **payload.model_dump(),
    )
    entry = await KnowledgeBaseRepository(session).create(entry)
    return KnowledgeBaseRead.model_validate(entry)


@router.put(
    "/{entry_id}",
    response_model=KnowledgeBaseRead,
    summary="Update Entry",
    responses={404: {"description": "Entry not found"}},
)
async def update_entry(
    entry_id: int,
    payload: KnowledgeBaseUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> KnowledgeBaseRead:
    entry = await _get_entry(session, entry_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key in ("question", "answer") and value is None:
            continue
        setattr(entry, key, value)
    entry = await KnowledgeBaseRepository(session).update(entry)
    return KnowledgeBaseRead.model_validate(entry)


@router.delete(
    "/{entry_id}",
    summary="Delete Entry",
    responses={404: {"description": "Entry not found"}},
)
async def delete_entry(
    entry_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    if not await KnowledgeBaseRepository(session).delete(entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    return {"message": "Entry deleted successfully"}
