"""
SQLModel entities for every Warden table.

Importing this package registers all tables with ``Base.metadata``.
"""

from .bot_settings import BotSettings
from .characters import ChannelCharacterMapping, CharacterMemory, CharacterSheet, CharacterSheetBase
from .documents import Document, StoredFile
from .knowledge_base import KnowledgeBaseEntry
from .lore import ChannelLoreTag, LoreEntry
from .prompts import Prompt, PromptSchedule, Trope
from .stats import ActivityFeed, CharacterStats
from .system_settings import SystemSetting
from .users import User

__all__ = [
    "ActivityFeed",
    "BotSettings",
    "ChannelCharacterMapping",
    "ChannelLoreTag",
    "CharacterMemory",
    "CharacterSheet",
    "CharacterSheetBase",
    "CharacterStats",
    "Document",
    "KnowledgeBaseEntry",
    "LoreEntry",
    "Prompt",
    "PromptSchedule",
    "StoredFile",
    "SystemSetting",
    "Trope",
    "User",
]
