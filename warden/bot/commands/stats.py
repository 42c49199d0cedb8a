"""
Character statistics commands for the Warden bot.

``!stats`` shows one character's counters in the current guild and
``!leaderboard`` ranks the guild's characters by a counter.
"""

from __future__ import annotations

import discord
from discord.ext import commands
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.database.repositories import (
    ChannelMappingRepository,
    CharacterRepository,
    CharacterStatsRepository,
    UserRepository,
)
from warden.core.logging_config import get_logger

logger = get_logger(__name__)

STATS_COLOR = 0x00FF00
LEADERBOARD_COLOR = 0xFFD700

# Accepted names -> (counter column, title, emoji)
LEADERBOARDS = {
    "messages": ("total_messages", "💬 Most Active Characters", "💬"),
    "msg": ("total_messages", "💬 Most Active Characters", "💬"),
    "rolls": ("total_dice_rolls", "🎲 Most Dice Rolls", "🎲"),
    "dice": ("total_dice_rolls", "🎲 Most Dice Rolls", "🎲"),
    "crits": ("nat20_count", "🎉 Most Natural 20s", "🎉"),
    "nat20": ("nat20_count", "🎉 Most Natural 20s", "🎉"),
    "fails": ("nat1_count", "💀 Most Natural 1s", "💀"),
    "nat1": ("nat1_count", "💀 Most Natural 1s", "💀"),
    "damage": ("total_damage_dealt", "⚔️ Most Damage Dealt", "⚔️"),
}

LEADERBOARD_USAGE = "Usage: `!leaderboard <messages|rolls|crits|fails|damage>`"
MEDALS = ["🥇", "🥈", "🥉"]


def _rank(position: int) -> str:
    return MEDALS[position] if position < len(MEDALS) else f"{position + 1}."


class StatsCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, session_factory: async_sessionmaker[AsyncSession]):
        self.bot = bot
        self.session_factory = session_factory

    @commands.command(name="stats")
    @commands.guild_only()
    async def stats(self, ctx: commands.Context, *, name: str = ""):
        """Show a character's stats in this server"""
        guild_id = str(ctx.guild.id)
        async with self.session_factory() as session:
            user = await UserRepository(session).get_by_discord_id(str(ctx.author.id))
            if user is None:
                await ctx.reply("❌ Your Discord account is not linked to Warden.")
                return

            characters = CharacterRepository(session)
            if name.strip():
                character = await characters.find_by_name(user.id, name, partial=True)
                if character is None:
                    await ctx.reply(f'Character "{name.strip()}" not found.')
                    return
            else:
                mapping = await ChannelMappingRepository(session).get_for_channel(
                    guild_id, str(ctx.channel.id), user.id
                )
                if mapping is None:
                    await ctx.reply("No character linked to this channel. Use `!setchar <character_name>` first.")
                    return
                character = await characters.get_by_id(mapping.character_id)

            stats = await CharacterStatsRepository(session).get_for_guild(character.id, guild_id)

        embed = discord.Embed(title=f"📊 {character.name} - Stats", color=STATS_COLOR)
        embed.add_field(name="💬 Messages", value=str(stats.total_messages if stats else 0), inline=True)
        embed.add_field(name="🎲 Dice Rolls", value=str(stats.total_dice_rolls if stats else 0), inline=True)
        embed.add_field(name="🎉 Natural 20s", value=str(stats.nat20_count if stats else 0), inline=True)
        embed.add_field(name="💀 Natural 1s", value=str(stats.nat1_count if stats else 0), inline=True)
        embed.add_field(name="⚔️ Damage Dealt", value=str(stats.total_damage_dealt if stats else 0), inline=True)
        last_active = f"{stats.last_active:%Y-%m-%d %H:%M} UTC" if stats else "Never"
        embed.add_field(name="📅 Last Active", value=last_active, inline=True)
        if character.avatar_url and character.avatar_url.startswith("http"):
            embed.set_thumbnail(url=character.avatar_url)
        await ctx.reply(embed=embed)

    @commands.command(name="leaderboard")
    @commands.guild_only()
    async def leaderboard(self, ctx: commands.Context, board: str = "messages"):
        """Rank this server's characters by a stat"""
        if board.lower() not in LEADERBOARDS:
            await ctx.reply(LEADERBOARD_USAGE)
            return
        counter, title, emoji = LEADERBOARDS[board.lower()]

        async with self.session_factory() as session:
            rows = await CharacterStatsRepository(session).guild_leaderboard(str(ctx.guild.id), counter)

        if not rows:
            await ctx.reply("No stats available yet. Start playing to track stats!")
            return

        lines = [
            f"{_rank(position)} **{row['character_name']}** - {emoji} {row['value']}"
            for position, row in enumerate(rows)
        ]
        await ctx.reply(embed=discord.Embed(title=title, description="\n".join(lines), color=LEADERBOARD_COLOR))
