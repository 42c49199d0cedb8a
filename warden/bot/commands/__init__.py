"""
Command cogs for the Warden bot.
"""

from .characters import CharacterCommands
from .help import HelpCommands
from .lore import LoreCommands
from .prompts import PromptCommands
from .stats import StatsCommands

__all__ = ["CharacterCommands", "HelpCommands", "LoreCommands", "PromptCommands", "StatsCommands"]
