"""
World-building lore commands for the Warden bot.

Lore entries are tagged notes scoped to a guild. A channel can be linked to
one tag with ``!set`` so that a bare ``!lore`` shows that tag's entries.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

import discord
from discord.ext import commands
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.database.entities.lore import LoreEntry
from warden.core.database.repositories.lore import ChannelLoreTagRepository, LoreRepository
from warden.core.database.repositories.users import UserRepository
from warden.core.logging_config import get_logger

logger = get_logger(__name__)

LORE_COLOR = 0x3498DB

# Discord rejects embeds past these limits
FIELD_LIMIT = 1024
MAX_FIELDS = 25
EMBED_LIMIT = 6000

LORE_HELP = (
    "📚 **Lore System**\n\n"
    "No lore tag set for this channel. Use `!set <tag>` to link this channel to a lore category.\n\n"
    "**Commands:**\n"
    "• `!lore add <tag> <note>` - Add lore entry\n"
    "• `!lore <tag>` - View lore for a tag\n"
    "• `!lore list` - View all lore\n"
    "• `!lore delete <id>` - Remove a lore entry\n"
    "• `!set <tag>` - Link channel to lore tag\n\n"
    "**Example Tags:** history, geography, factions, culture, npcs"
)

SET_HELP = (
    "📚 **Set Lore Tag**\n\n"
    "No lore tag set for this channel.\n\n"
    "Usage: `!set <tag>`\n\n"
    "Examples:\n"
    "• `!set history` - This channel will show history lore\n"
    "• `!set factions` - This channel will show faction lore"
)


def _entries_word(count: int) -> str:
    return "entry" if count == 1 else "entries"


def _tag_embed(tag: str, entries: List[LoreEntry]) -> discord.Embed:
    embed = discord.Embed(
        title=f"📚 {tag.capitalize()} Lore",
        description=f"{len(entries)} {_entries_word(len(entries))}",
        color=LORE_COLOR,
    )
    lore_list = "\n\n".join(
        f"**{entry.id}.** {entry.content}\n*Added {entry.created_at:%Y-%m-%d}*" for entry in entries
    )
    embed.add_field(name="Entries", value=lore_list[:FIELD_LIMIT], inline=False)
    if len(lore_list) > FIELD_LIMIT:
        embed.set_footer(text="Some entries truncated. Use !lore list to see all.")
    return embed


def _summary_embed(entries: List[LoreEntry]) -> discord.Embed:
    by_tag: Dict[str, List[LoreEntry]] = defaultdict(list)
    for entry in entries:
        by_tag[entry.tag].append(entry)

    embed = discord.Embed(
        title="📚 Server Lore",
        description=f"{len(entries)} total {_entries_word(len(entries))}",
        color=LORE_COLOR,
    )
    tags = sorted(by_tag)
    footer = f"Showing {{shown}} of {len(tags)} tags. Use !lore <tag> to see one tag in full."
    # Room for the footer text once the counts are filled in
    budget = EMBED_LIMIT - len(embed) - len(footer) - 10
    shown = 0
    for tag in tags:
        lines = [
            f"**{entry.id}.** {entry.content[:100]}{'...' if len(entry.content) > 100 else ''}"
            for entry in by_tag[tag]
        ]
        name = f"{tag} ({len(by_tag[tag])})"
        value = "\n".join(lines)[:FIELD_LIMIT]
        if shown == MAX_FIELDS or len(name) + len(value) > budget:
            break
        embed.add_field(name=name, value=value, inline=False)
        budget -= len(name) + len(value)
        shown += 1
    if shown < len(tags):
        embed.set_footer(text=footer.format(shown=shown))
    return embed


class LoreCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, session_factory: async_sessionmaker[AsyncSession]):
        self.bot = bot
        self.session_factory = session_factory

    @commands.command(name="lore")
    @commands.guild_only()
    async def lore(self, ctx: commands.Context, *args: str):
        """Show, add or delete lore for this server"""
        guild_id = str(ctx.guild.id)
        channel_id = str(ctx.channel.id)

        if not args:
            await self._show_channel_lore(ctx, guild_id, channel_id)
            return

        action = args[0].lower()
        if action == "list":
            await self._list(ctx, guild_id)
        elif action == "add":
            await self._add(ctx, guild_id, args[1:])
        elif action == "delete":
            await self._delete(ctx, guild_id, args[1:])
        else:
            await self._show_tag(ctx, guild_id, action)

    @commands.command(name="set")
    @commands.guild_only()
    async def set_tag(self, ctx: commands.Context, tag: str = ""):
        """Link this channel to a lore tag"""
        guild_id = str(ctx.guild.id)
        channel_id = str(ctx.channel.id)

        async with self.session_factory() as session:
            tags = ChannelLoreTagRepository(session)
            if not tag:
                channel_tag = await tags.get_for_channel(guild_id, channel_id)
                if channel_tag is None:
                    await ctx.reply(SET_HELP)
                else:
                    await ctx.reply(
                        f"📚 This channel is linked to lore tag: **{channel_tag.tag}**\n\nUse `!lore` to view entries."
                    )
                return
            tag = tag.lower()
            await tags.set_tag(guild_id, channel_id, tag)

        await ctx.reply(
            f"✅ Channel linked to lore tag: **{tag}**\n\nUse `!lore` to view entries or `!lore add {tag} <note>` to add."
        )

    async def _show_channel_lore(self, ctx: commands.Context, guild_id: str, channel_id: str) -> None:
        async with self.session_factory() as session:
            channel_tag = await ChannelLoreTagRepository(session).get_for_channel(guild_id, channel_id)
        if channel_tag is None:
            await ctx.reply(LORE_HELP)
            return
        await self._show_tag(ctx, guild_id, channel_tag.tag)

    async def _show_tag(self, ctx: commands.Context, guild_id: str, tag: str) -> None:
        async with self.session_factory() as session:
            entries = await LoreRepository(session).list_for_guild(guild_id, tag)
        if not entries:
            await ctx.reply(f"📚 No lore entries for tag **{tag}** yet.\n\nAdd one with: `!lore add {tag} <note>`")
            return
        await ctx.reply(embed=_tag_embed(tag, entries))

    async def _list(self, ctx: commands.Context, guild_id: str) -> None:
        async with self.session_factory() as session:
            entries = await LoreRepository(session).list_for_guild(guild_id)
        if not entries:
            await ctx.reply("📚 No lore entries yet. Add one with `!lore add <tag> <note>`")
            return
        await ctx.reply(embed=_summary_embed(entries))

    async def _add(self, ctx: commands.Context, guild_id: str, args) -> None:
        if len(args) < 2:
            await ctx.reply(
                "Usage: `!lore add <tag> <note>`\n\n"
                "Examples:\n"
                "• `!lore add history The Great War began in 1342`\n"
                "• `!lore add factions The Crimson Guild controls trade`"
            )
            return
        tag = args[0].lower()
        content = " ".join(args[1:])

        async with self.session_factory() as session:
            user = await UserRepository(session).get_by_discord_id(str(ctx.author.id))
            entry = await LoreRepository(session).create(
                LoreEntry(guild_id=guild_id, user_id=user.id if user else None, tag=tag, content=content)
            )
        logger.info(f"Lore entry {entry.id} added to guild {guild_id} under '{tag}'")
        await ctx.reply(f'✅ Lore added to **{tag}** (ID: {entry.id}):\n"{content}"')

    async def _delete(self, ctx: commands.Context, guild_id: str, args) -> None:
        if not args or not args[0].isdigit():
            await ctx.reply("Usage: `!lore delete <id>`")
            return
        entry_id = int(args[0])

        async with self.session_factory() as session:
            repo = LoreRepository(session)
            entry = await repo.get_by_id(entry_id)
            if entry is None or entry.guild_id != guild_id:
                await ctx.reply(f"❌ Lore entry #{entry_id} not found.")
                return
            await repo.delete(entry_id)

        preview = entry.content[:100]
        await ctx.reply(f'✅ Deleted lore entry #{entry_id}: "{preview}"')
