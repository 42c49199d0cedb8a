"""
Daily roleplay prompt scheduler.

An APScheduler cron job checks every minute for guilds whose daily prompt is
due and posts a random prompt to each guild's configured channel. The job
runs inside the bot's event loop; the Discord side is reached through a
``ChannelPoster`` so the scheduling logic can run without a gateway
connection.
"""

from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Any, Dict, Optional, Protocol
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.database.entities.bot_settings import BotSettings
from warden.core.database.entities.prompts import Prompt
from warden.core.database.repositories.bot_settings import BotSettingsRepository
from warden.core.database.repositories.prompts import PromptRepository
from warden.core.logging_config import get_logger
from warden.core.monitoring import log_prompt_posted

logger = get_logger(__name__)

JOB_ID = "daily_prompt_check"

EMBED_TITLE = "📝 Daily Roleplay Prompt"
EMBED_COLOR = 0x9B59B6
EMBED_FOOTER = "Warden Bot • Use !prompt for more prompts"


class ChannelPoster(Protocol):
    """Something that can deliver an embed to a Discord channel."""

    async def post_embed(self, channel_id: str, embed: Dict[str, Any]) -> bool:
        """Send ``embed`` to ``channel_id``.

        Returns:
            False when the channel does not exist or is not a text channel
        """
        ...


def build_daily_prompt_embed(prompt: Prompt, now: datetime) -> Dict[str, Any]:
    """Build the daily prompt embed in Discord's embed dict format."""
    return {
        "title": EMBED_TITLE,
        "description": prompt.prompt_text,
        "color": EMBED_COLOR,
        "fields": [{"name": "Category", "value": prompt.category.capitalize(), "inline": True}],
        "footer": {"text": EMBED_FOOTER},
        "timestamp": now.replace(tzinfo=timezone.utc).isoformat(),
    }


def local_window(now: datetime, timezone_name: str) -> tuple[str, datetime]:
    """Work out the current minute and the start of today in a timezone.

    Args:
        now: Current time as naive UTC
        timezone_name: IANA timezone the guild times are read in

    Returns:
        ``(current_time, day_start)`` where ``current_time`` is ``HH:MM:00``
        local time and ``day_start`` is local midnight as naive UTC
    """
    zone = ZoneInfo(timezone_name)
    local_now = now.replace(tzinfo=timezone.utc).astimezone(zone)
    current_time = local_now.strftime("%H:%M:00")
    local_midnight = datetime.combine(local_now.date(), time.min, tzinfo=zone)
    day_start = local_midnight.astimezone(timezone.utc).replace(tzinfo=None)
    return current_time, day_start


async def post_daily_prompt(
    session: AsyncSession, settings: BotSettings, poster: ChannelPoster, now: datetime
) -> bool:
    """Post one random prompt for a due guild.

    Returns:
        True when a prompt was posted and recorded
    """
    if not settings.daily_prompt_channel_id:
        logger.warning(f"Guild {settings.guild_id} has daily prompts enabled but no channel configured")
        return False

    prompts = PromptRepository(session)
    prompt = await prompts.get_random()
    if prompt is None:
        logger.warning(f"No prompts available to post for guild {settings.guild_id}")
        return False

    embed = build_daily_prompt_embed(prompt, now)
    if not await poster.post_embed(settings.daily_prompt_channel_id, embed):
        logger.warning(
            f"Daily prompt channel {settings.daily_prompt_channel_id} for guild {settings.guild_id} "
            f"is missing or not a text channel"
        )
        return False

    await prompts.record_use(prompt, used_at=now)
    await BotSettingsRepository(session).mark_prompt_posted(settings, now)
    log_prompt_posted(settings.guild_id, settings.daily_prompt_channel_id, prompt.id, prompt.category)
    logger.info(f"Posted daily prompt {prompt.id} to guild {settings.guild_id}")
    return True


async def check_and_post_daily_prompts(
    session_factory: async_sessionmaker[AsyncSession],
    poster: ChannelPoster,
    now: Optional[datetime] = None,
    timezone_name: str = "UTC",
) -> int:
    """Post the daily prompt for every guild that is due this minute.

    Each guild is handled in its own session; a failure for one guild is
    logged and the loop moves on to the next.

    Args:
        session_factory: Factory for database sessions
        poster: Channel poster used to deliver embeds
        now: Current time as naive UTC, defaults to the wall clock
        timezone_name: Timezone that guild prompt times are read in

    Returns:
        Number of prompts posted
    """
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    current_time, day_start = local_window(now, timezone_name)

    try:
        async with session_factory() as session:
            due = await BotSettingsRepository(session).list_due_for_daily_prompt(current_time, day_start)
            guild_ids = [settings.guild_id for settings in due]
    except Exception as e:
        logger.error(f"Failed to query guilds due for a daily prompt: {e}", exc_info=True)
        return 0

    if guild_ids:
        logger.debug(f"{len(guild_ids)} guild(s) due for a daily prompt at {current_time}")

    posted = 0
    for guild_id in guild_ids:
        try:
            async with session_factory() as session:
                settings = await BotSettingsRepository(session).get_by_guild(guild_id)
                if settings is None:
                    continue
                if await post_daily_prompt(session, settings, poster, now):
                    posted += 1
        except Exception as e:
            logger.error(f"Failed to post daily prompt for guild {guild_id}: {e}", exc_info=True)
    return posted


class PromptScheduler:
    """Owns the APScheduler job that runs the daily prompt check."""

    def __init__(
        self,
        poster: ChannelPoster,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        cron: str = "* * * * *",
        timezone_name: str = "UTC",
    ) -> None:
        if session_factory is None:
            from warden.core.database.session import async_session_maker

            session_factory = async_session_maker
        self.poster = poster
        self.session_factory = session_factory
        self.cron = cron
        self.timezone_name = timezone_name
        self._scheduler = AsyncIOScheduler(timezone=timezone_name)
        self._started = False

    @property
    def running(self) -> bool:
        return self._started and self._scheduler.running

    def start(self) -> None:
        """Register the cron job and start the scheduler.

        Must be called from inside a running event loop. Calling it again
        while the scheduler runs does nothing.
        """
        if self._started:
            logger.info("Prompt scheduler already started")
            return
        trigger = CronTrigger.from_crontab(self.cron, timezone=self.timezone_name)
        self._scheduler.add_job(
            self.run_once,
            trigger,
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        self._started = True
        logger.info(f"Prompt scheduler started: cron='{self.cron}', timezone={self.timezone_name}")

    async def run_once(self, now: Optional[datetime] = None) -> int:
        """Run one daily prompt check immediately."""
        return await check_and_post_daily_prompts(self.session_factory, self.poster, now, self.timezone_name)

    def shutdown(self) -> None:
        if not self._started:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._started = False
        logger.info("Prompt scheduler stopped")
