"""
Warden Discord client.

``WardenBot`` wires the command cogs and the daily prompt scheduler onto a
discord.py ``commands.Bot``. ``create_bot`` builds it from settings and
``main`` runs it standalone.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import discord
from discord.ext import commands
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.logging_config import get_logger
from warden.core.monitoring import log_bot_command

from .commands import CharacterCommands, HelpCommands, LoreCommands, PromptCommands, StatsCommands
from .scheduler import PromptScheduler

logger = get_logger(__name__)


class DiscordChannelPoster:
    """Posts embeds to text channels through a connected bot."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    async def post_embed(self, channel_id: str, embed: Dict[str, Any]) -> bool:
        try:
            channel = self.bot.get_channel(int(channel_id)) or await self.bot.fetch_channel(int(channel_id))
        except (discord.NotFound, discord.Forbidden, ValueError):
            return False
        if not isinstance(channel, discord.TextChannel):
            return False
        await channel.send(embed=discord.Embed.from_dict(embed))
        return True


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.messages = True
    intents.guilds = True
    intents.message_content = True
    return intents


class WardenBot(commands.Bot):
    """Discord bot serving the Warden commands and the daily prompt job."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        command_prefix: str = "!",
        prompt_cron: str = "* * * * *",
        prompt_timezone: str = "UTC",
    ) -> None:
        super().__init__(command_prefix=command_prefix, intents=build_intents(), help_command=None)
        self.session_factory = session_factory
        self.prompt_scheduler = PromptScheduler(
            DiscordChannelPoster(self),
            session_factory=session_factory,
            cron=prompt_cron,
            timezone_name=prompt_timezone,
        )

    async def setup_hook(self) -> None:
        await self.add_cog(PromptCommands(self, self.session_factory))
        await self.add_cog(LoreCommands(self, self.session_factory))
        await self.add_cog(CharacterCommands(self, self.session_factory))
        await self.add_cog(StatsCommands(self, self.session_factory))
        await self.add_cog(HelpCommands(self))
        logger.info(f"Loaded {len(self.cogs)} command cogs")

    async def on_ready(self) -> None:
        logger.info(f"{self.user} connected to Discord ({len(self.guilds)} guilds)")
        # on_ready fires again after reconnects; start() ignores repeat calls
        self.prompt_scheduler.start()

    async def on_command(self, ctx: commands.Context) -> None:
        guild_id = str(ctx.guild.id) if ctx.guild else None
        log_bot_command(ctx.command.qualified_name, guild_id, str(ctx.author.id))

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound):
            return
        if isinstance(error, commands.MissingPermissions):
            await ctx.reply("❌ Only administrators can use this command.")
            return
        if isinstance(error, commands.NoPrivateMessage):
            await ctx.reply("❌ This command can only be used in a server.")
            return
        if isinstance(error, (commands.BadArgument, commands.MissingRequiredArgument)):
            await ctx.reply(f"❌ {error}")
            return

        original = getattr(error, "original", error)
        command = ctx.command.qualified_name if ctx.command else "unknown"
        logger.error(f"Error in !{command}: {original}", exc_info=original)
        await ctx.reply("❌ Something went wrong running that command.")

    async def close(self) -> None:
        self.prompt_scheduler.shutdown()
        await super().close()


def create_bot(session_factory: Optional[async_sessionmaker[AsyncSession]] = None) -> WardenBot:
    """Build a ``WardenBot`` from the application settings."""
    from warden.server.core.config import settings

    if session_factory is None:
        from warden.core.database.session import async_session_maker

        session_factory = async_session_maker

    scheduler_config = settings.scheduler
    return WardenBot(
        session_factory,
        command_prefix=settings.bot.command_prefix,
        prompt_cron=scheduler_config.cron,
        prompt_timezone=scheduler_config.timezone,
    )


async def run_bot() -> None:
    from warden.core.database.session import init_db
    from warden.server.core.config import settings

    token = settings.bot.token
    if not token:
        raise RuntimeError("WARDEN_BOT_TOKEN is not set")

    await init_db()
    bot = create_bot()
    async with bot:
        await bot.start(token)


def main() -> None:
    """Entry point of the ``warden-bot`` script."""
    try:
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        logger.info("Warden bot stopped")
