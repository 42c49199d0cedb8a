"""
Character Trope Endpoints.

Manage the trope pool used by ``!trope``.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import Trope
from warden.core.database.repositories import TropeRepository
from warden.core.models.io.prompts import CategorySummary, TropeCreate, TropeRead
from warden.server.services.deps import CurrentUser

router = APIRouter(tags=["tropes"])


@router.get(
    "",
    response_model=List[TropeRead],
    summary="List Tropes",
    description="List tropes by name. A category of 'all' or none returns every trope.",
)
async def list_tropes(
    user: CurrentUser,
    category: Optional[str] = Query(default=None, description="Trope category, or 'all'"),
    session: AsyncSession = Depends(get_session),
) -> List[TropeRead]:
    if category == "all":
        category = None
    tropes = await TropeRepository(session).list_by_category(category)
    return [TropeRead.model_validate(trope) for trope in tropes]


@router.get(
    "/categories",
    response_model=List[CategorySummary],
    summary="Trope Categories",
)
async def trope_categories(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> List[CategorySummary]:
    summary = await TropeRepository(session).category_summary()
    return [CategorySummary(category=category, count=count, total_uses=total) for category, count, total in summary]


@router.get(
    "/popular",
    response_model=List[TropeRead],
    summary="Popular Tropes",
)
async def popular_tropes(
    user: CurrentUser,
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> List[TropeRead]:
    tropes = await TropeRepository(session).most_used(limit)
    return [TropeRead.model_validate(trope) for trope in tropes]


@router.post(
    "",
    response_model=TropeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Trope",
)
async def create_trope(
    payload: TropeCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> TropeRead:
    trope = await TropeRepository(session).create(
        Trope(name=payload.name, description=payload.description, category=payload.category.value)
    )
    return TropeRead.model_validate(trope)


@router.put(
    "/{trope_id}",
    response_model=TropeRead,
    summary="Update Trope",
    responses={404: {"description": "Trope not found"}},
)
async def update_trope(
    trope_id: int,
    payload: TropeCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> TropeRead:
    repo = TropeRepository(session)
    trope = await repo.get_by_id(trope_id)
    if trope is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trope not found")
    trope.name = payload.name
    trope.description = payload.description
    trope.category = payload.category.value
    trope = await repo.update(trope)
    return TropeRead.model_validate(trope)


@router.delete(
    "/{trope_id}",
    summary="Delete Trope",
    responses={404: {"description": "Trope not found"}},
)
async def delete_trope(
    trope_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    if not await TropeRepository(session).delete(trope_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trope not found")
    return {"success": True}
