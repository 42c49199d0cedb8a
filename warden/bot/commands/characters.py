"""
Character commands for the Warden bot.

``!setchar`` links the caller's character to the current channel, ``!char``
shows that link and ``!roll`` rolls free dice notation or a stat, save or
skill of the linked character. Character rolls are counted in the
character's stats for the guild.
"""

from __future__ import annotations

from typing import Optional

import discord
from discord.ext import commands
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.database.entities import CharacterSheet, User
from warden.core.database.repositories import (
    ActivityFeedRepository,
    ChannelMappingRepository,
    CharacterRepository,
    CharacterStatsRepository,
    UserRepository,
)
from warden.core.logging_config import get_logger
from warden.core.models.domain import InvalidRollError, is_dice_notation, resolve_named_roll, roll_dice

logger = get_logger(__name__)

ROLL_COLOR = 0x0099FF
MAX_ROLL_COLOR = 0x00FF00
MIN_ROLL_COLOR = 0xFF0000

NOT_LINKED = "❌ Your Discord account is not linked to Warden. Link it from your account settings first."
NO_CHARACTER = "❌ No character linked to this channel. Use `!setchar <name>` first."
ROLL_USAGE = (
    "Usage: `!roll <dice or stat>`\n"
    "Examples: `!roll d20`, `!roll 2d6+3`, `!roll strength`, `!roll perception`"
)


def _roll_color(natural: int, sides: int) -> int:
    if natural == sides:
        return MAX_ROLL_COLOR
    if natural == 1:
        return MIN_ROLL_COLOR
    return ROLL_COLOR


class CharacterCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, session_factory: async_sessionmaker[AsyncSession]):
        self.bot = bot
        self.session_factory = session_factory

    async def _linked_user(self, session: AsyncSession, ctx: commands.Context) -> Optional[User]:
        return await UserRepository(session).get_by_discord_id(str(ctx.author.id))

    async def _channel_character(
        self, session: AsyncSession, ctx: commands.Context, user: User
    ) -> Optional[CharacterSheet]:
        mapping = await ChannelMappingRepository(session).get_for_channel(
            str(ctx.guild.id), str(ctx.channel.id), user.id
        )
        if mapping is None:
            return None
        return await CharacterRepository(session).get_for_user(mapping.character_id, user.id)

    @commands.command(name="setchar")
    @commands.guild_only()
    async def set_char(self, ctx: commands.Context, *, name: str = ""):
        """Link one of your characters to this channel"""
        if not name.strip():
            await ctx.reply("Usage: `!setchar <character_name>`\nExample: `!setchar Ogun`")
            return

        async with self.session_factory() as session:
            user = await self._linked_user(session, ctx)
            if user is None:
                await ctx.reply(NOT_LINKED)
                return
            character = await CharacterRepository(session).find_by_name(user.id, name)
            if character is None:
                await ctx.reply(f'❌ Character "{name.strip()}" not found. Check spelling and try again.')
                return
            await ChannelMappingRepository(session).assign(
                str(ctx.guild.id), str(ctx.channel.id), user.id, character.id
            )

        logger.info(f"Channel {ctx.channel.id} in guild {ctx.guild.id} linked to character {character.id}")
        await ctx.reply(f"✅ This channel is now linked to **{character.name}**! Rolls will use this character.")

    @commands.command(name="char")
    @commands.guild_only()
    async def show_char(self, ctx: commands.Context):
        """Show the character linked to this channel"""
        async with self.session_factory() as session:
            user = await self._linked_user(session, ctx)
            if user is None:
                await ctx.reply(NOT_LINKED)
                return
            character = await self._channel_character(session, ctx, user)

        if character is None:
            await ctx.reply("❌ No character is linked to this channel. Use `!setchar <name>` to link one.")
            return
        await ctx.reply(
            f"📋 This channel is linked to **{character.name}** "
            f"(Level {character.level} {character.character_class or 'Character'})"
        )

    @commands.command(name="roll")
    async def roll(self, ctx: commands.Context, *, target: str = ""):
        """Roll dice notation, or a stat, save or skill of the linked character"""
        if not target.strip():
            await ctx.reply(ROLL_USAGE)
            return
        if is_dice_notation(target):
            await self._roll_dice(ctx, target)
            return
        if ctx.guild is None:
            await ctx.reply("❌ Character rolls can only be used in a server.")
            return

        async with self.session_factory() as session:
            user = await self._linked_user(session, ctx)
            if user is None:
                await ctx.reply(NOT_LINKED)
                return
            character = await self._channel_character(session, ctx, user)
            if character is None:
                await ctx.reply(NO_CHARACTER)
                return
            try:
                result = resolve_named_roll(character, target)
            except InvalidRollError as e:
                await ctx.reply(f"❌ {e}.")
                return

            guild_id = str(ctx.guild.id)
            await CharacterStatsRepository(session).increment(
                character.id,
                guild_id,
                dice_rolls=1,
                nat20s=int(result.natural_20),
                nat1s=int(result.natural_1),
            )
            await ActivityFeedRepository(session).add(
                character.id,
                "roll",
                f"Rolled {result.description}: {result.total}",
                {
                    "dice_roll": result.dice_roll,
                    "modifier": result.modifier,
                    "total": result.total,
                    "guild_id": guild_id,
                    "nat20": result.natural_20,
                    "nat1": result.natural_1,
                },
            )

        embed = discord.Embed(
            title=f"🎲 {character.name} - {result.description}",
            description=f"**{result.dice_roll}** {result.modifier:+d} = **{result.total}**",
            color=_roll_color(result.dice_roll, 20),
        )
        if result.natural_20:
            embed.add_field(name="🎉", value="Natural 20!", inline=True)
        elif result.natural_1:
            embed.add_field(name="💀", value="Natural 1!", inline=True)
        embed.set_footer(text=f"Rolled by {ctx.author.display_name}")
        await ctx.reply(embed=embed)

    async def _roll_dice(self, ctx: commands.Context, notation: str) -> None:
        try:
            dice = roll_dice(notation)
        except InvalidRollError as e:
            await ctx.reply(f"❌ {e}")
            return

        lines = [f"**{dice.notation}**", f"Rolls: [{', '.join(map(str, dice.rolls))}]"]
        if dice.count > 1:
            lines[-1] += f" = {sum(dice.rolls)}"
        if dice.modifier:
            lines.append(f"Modifier: {dice.modifier:+d}")
        lines.append(f"**Total: {dice.total}**")

        single = dice.rolls[0] if dice.count == 1 else None
        embed = discord.Embed(
            title="🎲 Dice Roll",
            description="\n".join(lines),
            color=_roll_color(single, dice.sides) if single is not None else ROLL_COLOR,
        )
        if single == dice.sides:
            embed.add_field(name="🎉", value=f"Natural {dice.sides}!", inline=True)
        elif single == 1:
            embed.add_field(name="💀", value="Natural 1!", inline=True)
        embed.set_footer(text=f"Rolled by {ctx.author.display_name}")
        await ctx.reply(embed=embed)
