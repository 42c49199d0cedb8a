"""
``!help`` for the Warden bot, replacing discord.py's default help command.
"""

from __future__ import annotations

import discord
from discord.ext import commands

HELP_COLOR = 0xFF6B6B

HELP_SECTIONS = (
    (
        "🎭 Characters",
        "`!setchar <name>` - Link your character to this channel\n"
        "`!char` - Show the character linked to this channel",
    ),
    (
        "🎲 Dice & Stats",
        "`!roll <dice>` - Roll dice (e.g. `!roll 1d20+5`)\n"
        "`!roll <stat>` - Roll an ability, save or skill of the linked character\n"
        "`!stats [character]` - View character stats\n"
        "`!leaderboard <messages|rolls|crits|fails|damage>` - View leaderboards",
    ),
    (
        "💭 Prompts & Tropes",
        "`!prompt [category]` - Get a roleplay prompt\n"
        "`!trope [category]` - Get a character trope\n"
        "`!promptsettings` - Configure the daily prompt (admins)",
    ),
    (
        "📚 Lore",
        "`!lore` - Lore for this channel's tag\n"
        "`!lore add <tag> <note>` - Add a lore entry\n"
        "`!lore list` - View all lore\n"
        "`!set <tag>` - Link this channel to a lore tag",
    ),
)


def build_help_embed() -> discord.Embed:
    embed = discord.Embed(
        title="✨ Warden Bot Commands",
        description="Your tabletop roleplay companion!",
        color=HELP_COLOR,
    )
    for name, value in HELP_SECTIONS:
        embed.add_field(name=name, value=value, inline=False)
    embed.set_footer(text="Manage your characters on the Warden website.")
    return embed


class HelpCommands(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.command(name="help")
    async def show_help(self, ctx: commands.Context):
        """List the bot's commands"""
        await ctx.reply(embed=build_help_embed())
