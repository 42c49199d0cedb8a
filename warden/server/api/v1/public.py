"""
Public Character Endpoints.

Read-only, unauthenticated access to characters their owners have published.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.repositories import CharacterRepository
from warden.core.models.io.characters import CharacterSummary, PublicCharacterRead

router = APIRouter(tags=["public"])


@router.get(
    "/characters",
    response_model=List[CharacterSummary],
    summary="List Public Characters",
    description="List published characters, most viewed first.",
)
async def list_public_characters(
    limit: int = Query(default=50, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> List[CharacterSummary]:
    characters = await CharacterRepository(session).list_public(limit)
    return [CharacterSummary.model_validate(character) for character in characters]


@router.get(
    "/characters/{slug}",
    response_model=PublicCharacterRead,
    summary="Get Public Character",
    description="Return a published character by slug and count the view. Secrets are never included.",
    responses={404: {"description": "Character not found or not public"}},
)
async def get_public_character(
    slug: str,
    session: AsyncSession = Depends(get_session),
) -> PublicCharacterRead:
    repo = CharacterRepository(session)
    character = await repo.get_public_by_slug(slug)
    if character is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found or not public")
    # Views do not touch updated_at
    character.public_views += 1
    session.add(character)
    await session.commit()
    await session.refresh(character)
    return PublicCharacterRead.from_entity(character)
