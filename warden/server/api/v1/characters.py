"""
Character Sheet Endpoints.

Owner scoped CRUD over character sheets, d20 rolls against a sheet, public
sharing and the memories a character keeps.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import CharacterMemory, CharacterSheet
from warden.core.database.repositories import CharacterMemoryRepository, CharacterRepository
from warden.core.logging_config import get_logger
from warden.core.models.domain import InvalidRollError, resolve_roll, unique_slug
from warden.core.models.io.characters import (
    CharacterCreate,
    CharacterRead,
    CharacterUpdate,
    MemoryCreate,
    MemoryRead,
    MemoryUpdate,
    PublicStatus,
    PublicToggle,
    RollRequest,
    RollResponse,
)
from warden.server.services.deps import CurrentUser

logger = get_logger(__name__)

router = APIRouter(tags=["characters"])


async def _get_owned_character(session: AsyncSession, character_id: int, user_id: int) -> CharacterSheet:
    character = await CharacterRepository(session).get_for_user(character_id, user_id)
    if character is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    return character


async def _get_owned_memory(session: AsyncSession, memory_id: int, user_id: int) -> CharacterMemory:
    memory = await CharacterMemoryRepository(session).get_by_id(memory_id)
    if memory is None or await CharacterRepository(session).get_for_user(memory.character_id, user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Memory not found")
    return memory


@router.get(
    "",
    response_model=List[CharacterRead],
    summary="List Characters",
    description="List the caller's character sheets, most recently updated first.",
)
async def list_characters(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> List[CharacterRead]:
    characters = await CharacterRepository(session).list_for_user(user.id)
    return [CharacterRead.from_entity(character) for character in characters]


@router.post(
    "",
    response_model=CharacterRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Character",
    description="Create a character sheet owned by the caller.",
    response_description="The created character sheet with its ability modifiers.",
)
async def create_character(
    payload: CharacterCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> CharacterRead:
    character = CharacterSheet(**payload.model_dump(), user_id=user.id)
    character = await CharacterRepository(session).create(character)
    logger.info(f"User {user.id} created character {character.id} ({character.name})")
    return CharacterRead.from_entity(character)


@router.get(
    "/{character_id}",
    response_model=CharacterRead,
    summary="Get Character",
    responses={404: {"description": "Character not found"}},
)
async def get_character(
    character_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> CharacterRead:
    character = await _get_owned_character(session, character_id, user.id)
    return CharacterRead.from_entity(character)


@router.put(
    "/{character_id}",
    response_model=CharacterRead,
    summary="Update Character",
    description="Update the fields present in the request body.",
    responses={404: {"description": "Character not found"}},
)
async def update_character(
    character_id: int,
    payload: CharacterUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> CharacterRead:
    """
    Update a character sheet.

    Only the fields sent by the client are changed; a ``name`` of null is ignored.
    """
    character = await _get_owned_character(session, character_id, user.id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    for key, value in changes.items():
        setattr(character, key, value)
    character = await CharacterRepository(session).update(character)
    return CharacterRead.from_entity(character)


@router.delete(
    "/{character_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Character",
    responses={404: {"description": "Character not found"}},
)
async def delete_character(
    character_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    await _get_owned_character(session, character_id, user.id)
    await CharacterRepository(session).delete(character_id)
    logger.info(f"User {user.id} deleted character {character_id}")


@router.post(
    "/{character_id}/roll",
    response_model=RollResponse,
    summary="Roll for Character",
    description="Roll a d20 for an ability check, skill check, saving throw or an advantage/disadvantage roll.",
    responses={
        400: {"description": "Missing or unknown stat"},
        404: {"description": "Character not found"},
    },
)
async def roll(
    character_id: int,
    payload: RollRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> RollResponse:
    character = await _get_owned_character(session, character_id, user.id)
    try:
        result = resolve_roll(character, payload.stat, payload.roll_type, payload.skill_name)
    except InvalidRollError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.debug(f"Roll for {character.name} ({character.id}): {result.description} = {result.total}")
    return RollResponse(
        character_id=character.id,
        character_name=character.name,
        description=result.description,
        dice_roll=result.dice_roll,
        rolls=result.rolls,
        modifier=result.modifier,
        total=result.total,
        natural_20=result.natural_20,
        natural_1=result.natural_1,
    )


@router.patch(
    "/{character_id}/public",
    response_model=PublicStatus,
    summary="Toggle Public Profile",
    description="Publish or unpublish a character. Publishing assigns a unique slug derived from the name.",
    responses={404: {"description": "Character not found"}},
)
async def toggle_public(
    character_id: int,
    payload: PublicToggle,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> PublicStatus:
    repo = CharacterRepository(session)
    character = await _get_owned_character(session, character_id, user.id)

    if payload.is_public:
        if not character.public_slug:

            async def is_taken(slug: str) -> bool:
                return await repo.slug_in_use(slug, exclude_id=character.id)

            character.public_slug = await unique_slug(character.name, is_taken)
    else:
        character.public_slug = None
    character.is_public = payload.is_public
    character = await repo.update(character)

    if not character.is_public:
        return PublicStatus(is_public=False)
    return PublicStatus(
        is_public=True,
        public_slug=character.public_slug,
        public_url=f"/public/{character.public_slug}",
    )


@router.get(
    "/{character_id}/memories",
    response_model=List[MemoryRead],
    summary="List Memories",
    responses={404: {"description": "Character not found"}},
)
async def list_memories(
    character_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> List[MemoryRead]:
    await _get_owned_character(session, character_id, user.id)
    memories = await CharacterMemoryRepository(session).list_for_character(character_id)
    return [MemoryRead.model_validate(memory) for memory in memories]


@router.post(
    "/{character_id}/memories",
    response_model=MemoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Memory",
    responses={404: {"description": "Character not found"}},
)
async def add_memory(
    character_id: int,
    payload: MemoryCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> MemoryRead:
    await _get_owned_character(session, character_id, user.id)
    memory = await CharacterMemoryRepository(session).create(
        CharacterMemory(
            character_id=character_id,
            guild_id=payload.guild_id,
            memory=payload.memory,
            added_by=user.username,
        )
    )
    return MemoryRead.model_validate(memory)


@router.put(
    "/memories/{memory_id}",
    response_model=MemoryRead,
    summary="Update Memory",
    responses={404: {"description": "Memory not found"}},
)
async def update_memory(
    memory_id: int,
    payload: MemoryUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> MemoryRead:
    memory = await _get_owned_memory(session, memory_id, user.id)
    memory.memory = payload.memory
    memory = await CharacterMemoryRepository(session).update(memory)
    return MemoryRead.model_validate(memory)


@router.delete(
    "/memories/{memory_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Memory",
    responses={404: {"description": "Memory not found"}},
)
async def delete_memory(
    memory_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    await _get_owned_memory(session, memory_id, user.id)
    await CharacterMemoryRepository(session).delete(memory_id)
