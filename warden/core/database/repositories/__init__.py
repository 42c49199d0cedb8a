"""
Repositories wrapping SQLModel queries for each table group.
"""

from .base import AsyncBaseRepository, AsyncCrudRepository, AsyncQueryBuilder
from .bot_settings import BotSettingsRepository
from .characters import ChannelMappingRepository, CharacterMemoryRepository, CharacterRepository
from .documents import DocumentRepository, StoredFileRepository
from .knowledge_base import KnowledgeBaseRepository
from .lore import ChannelLoreTagRepository, LoreRepository
from .prompts import PromptRepository, PromptScheduleRepository, TropeRepository
from .stats import ActivityFeedRepository, CharacterStatsRepository
from .system_settings import SystemSettingsRepository
from .users import UserRepository

__all__ = [
    "ActivityFeedRepository",
    "AsyncBaseRepository",
    "AsyncCrudRepository",
    "AsyncQueryBuilder",
    "BotSettingsRepository",
    "ChannelLoreTagRepository",
    "ChannelMappingRepository",
    "CharacterMemoryRepository",
    "CharacterRepository",
    "CharacterStatsRepository",
    "DocumentRepository",
    "KnowledgeBaseRepository",
    "LoreRepository",
    "PromptRepository",
    "PromptScheduleRepository",
    "StoredFileRepository",
    "SystemSettingsRepository",
    "TropeRepository",
    "UserRepository",
]
