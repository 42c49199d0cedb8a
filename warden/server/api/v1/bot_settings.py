"""
Guild Bot Settings Endpoints.

Configure a guild's announcement channel and daily prompt from the web.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import BotSettings
from warden.core.database.repositories import BotSettingsRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.bot_settings import BotSettingsRead, BotSettingsUpdate
from warden.server.services.deps import CurrentUser

logger = get_logger(__name__)

router = APIRouter(tags=["bot-settings"])


@router.get(
    "/{guild_id}",
    response_model=BotSettingsRead,
    summary="Get Bot Settings",
    description="Return a guild's bot settings. Guilds without a row get the defaults.",
)
async def get_bot_settings(
    guild_id: str,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> BotSettingsRead:
    settings = await BotSettingsRepository(session).get_by_guild(guild_id)
    if settings is None:
        settings = BotSettings(guild_id=guild_id)
    return BotSettingsRead.model_validate(settings)


@router.put(
    "/{guild_id}",
    response_model=BotSettingsRead,
    summary="Update Bot Settings",
    description="Change a guild's bot settings. The daily prompt time is a 24h HH:MM value.",
)
async def update_bot_settings(
    guild_id: str,
    payload: BotSettingsUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> BotSettingsRead:
    values = payload.model_dump(exclude_unset=True)
    for key in ("daily_prompt_enabled", "daily_prompt_time"):
        if values.get(key) is None:
            values.pop(key, None)
    settings = await BotSettingsRepository(session).upsert(guild_id, **values)
    logger.info(f"User {user.id} updated bot settings of guild {guild_id}: {sorted(values)}")
    return BotSettingsRead.model_validate(settings)
