"""
Lore Endpoints.

Guild lore entries and the lore tag linked to each Discord channel.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import LoreEntry
from warden.core.database.repositories import ChannelLoreTagRepository, LoreRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.lore import ChannelTagRead, ChannelTagSet, LoreEntryCreate, LoreEntryRead
from warden.server.services.deps import CurrentUser

logger = get_logger(__name__)

router = APIRouter(tags=["lore"])


@router.get(
    "/guild/{guild_id}",
    response_model=List[LoreEntryRead],
    summary="List Guild Lore",
    description="List a guild's lore entries newest first, optionally restricted to one tag.",
)
async def list_guild_lore(
    guild_id: str,
    user: CurrentUser,
    tag: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
) -> List[LoreEntryRead]:
    entries = await LoreRepository(session).list_for_guild(guild_id, tag)
    return [LoreEntryRead.model_validate(entry) for entry in entries]


@router.get(
    "/channel/{guild_id}/{channel_id}/tag",
    response_model=Optional[ChannelTagRead],
    summary="Get Channel Lore Tag",
    description="Return the lore tag linked to a channel, or null when none is set.",
)
async def get_channel_tag(
    guild_id: str,
    channel_id: str,
    session: AsyncSession = Depends(get_session),
) -> Optional[ChannelTagRead]:
    channel_tag = await ChannelLoreTagRepository(session).get_for_channel(guild_id, channel_id)
    return ChannelTagRead.model_validate(channel_tag) if channel_tag else None


@router.post(
    "",
    response_model=LoreEntryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Lore Entry",
)
async def create_lore_entry(
    payload: LoreEntryCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> LoreEntryRead:
    entry = await LoreRepository(session).create(
        LoreEntry(guild_id=payload.guild_id, user_id=user.id, tag=payload.tag, content=payload.content)
    )
    logger.info(f"Lore entry {entry.id} added to guild {entry.guild_id} under '{entry.tag}'")
    return LoreEntryRead.model_validate(entry)


@router.post(
    "/channel/tag",
    response_model=ChannelTagRead,
    summary="Set Channel Lore Tag",
    description="Link a channel to a lore tag, replacing its previous tag.",
)
async def set_channel_tag(
    payload: ChannelTagSet,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> ChannelTagRead:
    channel_tag = await ChannelLoreTagRepository(session).set_tag(payload.guild_id, payload.channel_id, payload.tag)
    return ChannelTagRead.model_validate(channel_tag)


@router.delete(
    "/{entry_id}",
    summary="Delete Lore Entry",
    responses={404: {"description": "Lore entry not found"}},
)
async def delete_lore_entry(
    entry_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    if not await LoreRepository(session).delete(entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lore entry not found")
    return {"success": True}
