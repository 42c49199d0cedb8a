"""
Prompt and trope commands for the Warden bot.

Handles ``!prompt``, ``!trope`` and the administrator-only
``!promptsettings`` that configures the daily prompt for a guild.
"""

from __future__ import annotations

import re
from typing import Optional

import discord
from discord.ext import commands
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.database.repositories.bot_settings import BotSettingsRepository
from warden.core.database.repositories.prompts import PromptRepository, TropeRepository
from warden.core.logging_config import get_logger
from warden.core.models.domain.enums import PromptCategory, TropeCategory
from warden.core.models.domain.prompt_time import normalize_prompt_time

logger = get_logger(__name__)

PROMPT_COLOR = 0x9B59B6
TROPE_COLOR = 0xE74C3C

_CHANNEL_MENTION = re.compile(r"^<#(\d+)>$")

PROMPT_SETTINGS_HELP = (
    "**Prompt Settings Commands:**\n"
    "`!promptsettings enable <#channel> <HH:MM>` - Enable daily prompts\n"
    "`!promptsettings disable` - Disable daily prompts\n"
    "`!promptsettings status` - Show current settings"
)


def _valid(categories) -> str:
    return ", ".join(category.value for category in categories)


class PromptCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, session_factory: async_sessionmaker[AsyncSession]):
        self.bot = bot
        self.session_factory = session_factory

    @commands.command(name="prompt")
    async def prompt(self, ctx: commands.Context, *args: str):
        """Post a random roleplay prompt, optionally from one category"""
        words = [arg.lower() for arg in args]
        if words and words[0] == "random":
            words = words[1:]
        category = " ".join(words) or None

        if category is not None and category not in {c.value for c in PromptCategory}:
            await ctx.reply(f"❌ Invalid category. Valid categories: {_valid(PromptCategory)}")
            return

        async with self.session_factory() as session:
            prompts = PromptRepository(session)
            prompt = await prompts.get_random(category)
            if prompt is None:
                if category:
                    await ctx.reply(f'❌ No prompts found for category "{category}".')
                else:
                    await ctx.reply("❌ No prompts available. Add some prompts to the database!")
                return
            await prompts.record_use(prompt)

        embed = discord.Embed(
            title=f"💭 {prompt.category.capitalize()} Prompt",
            description=prompt.prompt_text,
            color=PROMPT_COLOR,
        )
        embed.set_footer(text=f"Prompt #{prompt.id}")
        await ctx.reply(embed=embed)

    @commands.command(name="trope")
    async def trope(self, ctx: commands.Context, *args: str):
        """Post a random character trope, optionally from one category"""
        category = " ".join(args).lower() or None

        if category is not None and category not in {c.value for c in TropeCategory}:
            await ctx.reply(f"❌ Invalid category. Valid categories: {_valid(TropeCategory)}")
            return

        async with self.session_factory() as session:
            tropes = TropeRepository(session)
            trope = await tropes.get_random(category)
            if trope is None:
                await ctx.reply("❌ No tropes available.")
                return
            await tropes.record_use(trope)

        embed = discord.Embed(title=f"🎭 {trope.name}", description=trope.description, color=TROPE_COLOR)
        embed.set_footer(text=f"{trope.category.capitalize()} Trope")
        await ctx.reply(embed=embed)

    @commands.command(name="promptsettings")
    @commands.guild_only()
    @commands.has_permissions(administrator=True)
    async def prompt_settings(
        self,
        ctx: commands.Context,
        subcommand: Optional[str] = None,
        channel: Optional[str] = None,
        time_value: Optional[str] = None,
    ):
        """Configure the guild's daily prompt (administrators only)"""
        guild_id = str(ctx.guild.id)
        action = (subcommand or "").lower()

        if action == "enable":
            await self._enable(ctx, guild_id, channel, time_value)
        elif action == "disable":
            async with self.session_factory() as session:
                repo = BotSettingsRepository(session)
                if await repo.get_by_guild(guild_id) is not None:
                    await repo.upsert(guild_id, daily_prompt_enabled=False)
            await ctx.reply("✅ Daily prompts disabled.")
        elif action == "status":
            await self._status(ctx, guild_id)
        else:
            await ctx.reply(PROMPT_SETTINGS_HELP)

    async def _enable(
        self, ctx: commands.Context, guild_id: str, channel: Optional[str], time_value: Optional[str]
    ) -> None:
        if not channel or not time_value:
            await ctx.reply(
                "Usage: `!promptsettings enable <#channel> <HH:MM>`\n"
                "Example: `!promptsettings enable #rp-prompts 09:00`"
            )
            return

        match = _CHANNEL_MENTION.match(channel)
        if match is None:
            await ctx.reply("❌ Invalid channel mention. Use #channel format.")
            return
        channel_id = match.group(1)

        try:
            prompt_time = normalize_prompt_time(time_value)
        except ValueError:
            await ctx.reply("❌ Invalid time format. Use HH:MM (e.g., 09:00, 14:30)")
            return

        async with self.session_factory() as session:
            await BotSettingsRepository(session).upsert(
                guild_id,
                daily_prompt_enabled=True,
                daily_prompt_channel_id=channel_id,
                daily_prompt_time=prompt_time,
            )
        logger.info(f"Daily prompts enabled for guild {guild_id} in channel {channel_id} at {prompt_time}")
        await ctx.reply(f"✅ Daily prompts enabled!\n📍 Channel: <#{channel_id}>\n⏰ Time: {prompt_time[:5]}")

    async def _status(self, ctx: commands.Context, guild_id: str) -> None:
        async with self.session_factory() as session:
            settings = await BotSettingsRepository(session).get_by_guild(guild_id)

        if settings is None or not settings.daily_prompt_enabled:
            await ctx.reply("❌ Daily prompts are not enabled. Use `!promptsettings enable` to set up.")
            return

        last_posted = (
            settings.last_prompt_posted.strftime("%Y-%m-%d %H:%M UTC") if settings.last_prompt_posted else "Never"
        )
        await ctx.reply(
            "📊 Daily Prompt Settings:\n"
            "Status: ✅ Enabled\n"
            f"Channel: <#{settings.daily_prompt_channel_id}>\n"
            f"Time: {settings.daily_prompt_time}\n"
            f"Last Posted: {last_posted}"
        )
