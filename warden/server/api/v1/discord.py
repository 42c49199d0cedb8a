"""
Discord Bot Endpoints.

Called by the Discord bot to link Discord users to accounts, look up a
linked user's characters and pick the character a user plays in a channel.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import User
from warden.core.database.repositories import ChannelMappingRepository, CharacterRepository, UserRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.characters import CharacterSummary
from warden.core.models.io.discord import (
    ChannelMappingRead,
    ChannelMappingSet,
    DiscordCharacterRead,
    DiscordLoginRequest,
    DiscordLoginResponse,
    DiscordUserCharacters,
    DiscordUserRead,
)
from warden.server.services.security import verify_password

logger = get_logger(__name__)

router = APIRouter(tags=["discord"])


async def _get_linked_user(session: AsyncSession, discord_user_id: str) -> User:
    user = await UserRepository(session).get_by_discord_id(discord_user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Discord account not linked")
    return user


@router.post(
    "/login",
    response_model=DiscordLoginResponse,
    summary="Link Discord Account",
    description="Check an account's credentials and link it to the calling Discord user.",
    responses={
        400: {"description": "Discord user already linked to another account"},
        401: {"description": "Invalid username or password"},
    },
)
async def discord_login(
    payload: DiscordLoginRequest,
    session: AsyncSession = Depends(get_session),
) -> DiscordLoginResponse:
    repo = UserRepository(session)
    user = await repo.get_by_username(payload.username)
    if user is None or not verify_password(payload.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    if user.discord_user_id != payload.discord_user_id:
        existing = await repo.get_by_discord_id(payload.discord_user_id)
        if existing is not None and existing.id != user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"This Discord account is already linked to another account ({existing.username})",
            )
        user.discord_user_id = payload.discord_user_id
        user = await repo.update(user)
        logger.info(f"Linked Discord user {payload.discord_user_id} to user {user.id}")

    characters = await CharacterRepository(session).list_for_user(user.id)
    return DiscordLoginResponse(
        user=DiscordUserRead.model_validate(user),
        characters=[CharacterSummary.model_validate(character) for character in characters],
    )


@router.get(
    "/user/{discord_user_id}",
    response_model=DiscordUserCharacters,
    summary="Get Linked User",
    description="Return the account linked to a Discord user with its characters' ability scores.",
    responses={404: {"description": "Discord account not linked"}},
)
async def get_discord_user(
    discord_user_id: str,
    session: AsyncSession = Depends(get_session),
) -> DiscordUserCharacters:
    user = await _get_linked_user(session, discord_user_id)
    characters = await CharacterRepository(session).list_for_user(user.id)
    return DiscordUserCharacters(
        user=DiscordUserRead.model_validate(user),
        characters=[DiscordCharacterRead.model_validate(character) for character in characters],
    )


@router.get(
    "/channel-mappings/{guild_id}/{channel_id}",
    response_model=ChannelMappingRead,
    summary="Get Channel Character",
    description="Return the character a linked Discord user plays in a channel.",
    responses={404: {"description": "Not linked or no character mapped"}},
)
async def get_channel_mapping(
    guild_id: str,
    channel_id: str,
    discord_user_id: str = Query(min_length=1),
    session: AsyncSession = Depends(get_session),
) -> ChannelMappingRead:
    user = await _get_linked_user(session, discord_user_id)
    mapping = await ChannelMappingRepository(session).get_for_channel(guild_id, channel_id, user.id)
    if mapping is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No character mapped to this channel")
    return ChannelMappingRead.model_validate(mapping)


@router.put(
    "/channel-mappings/{guild_id}/{channel_id}",
    response_model=ChannelMappingRead,
    summary="Set Channel Character",
    description="Choose which of the linked user's characters they play in a channel.",
    responses={404: {"description": "Not linked or character not owned"}},
)
async def set_channel_mapping(
    guild_id: str,
    channel_id: str,
    payload: ChannelMappingSet,
    session: AsyncSession = Depends(get_session),
) -> ChannelMappingRead:
    user = await _get_linked_user(session, payload.discord_user_id)
    if await CharacterRepository(session).get_for_user(payload.character_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    mapping = await ChannelMappingRepository(session).assign(guild_id, channel_id, user.id, payload.character_id)
    return ChannelMappingRead.model_validate(mapping)
