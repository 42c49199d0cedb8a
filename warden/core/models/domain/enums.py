"""Domain enums shared by the API, the bot and the database layer."""

from __future__ import annotations

from enum import Enum


class PromptCategory(str, Enum):
    """Categories a roleplay prompt can belong to."""

    character = "character"
    world = "world"
    combat = "combat"
    social = "social"
    plot = "plot"


class TropeCategory(str, Enum):
    """Categories a character trope can belong to."""

    archetype = "archetype"
    dynamic = "dynamic"
    situation = "situation"
    plot = "plot"


class RollType(str, Enum):
    """
    Kinds of d20 roll a character sheet can make.

    ``advantage`` and ``disadvantage`` roll two dice and keep the higher or
    lower one; ``attack`` resolves like an ability check.
    """

    ability = "ability"
    skill = "skill"
    save = "save"
    attack = "attack"
    advantage = "advantage"
    disadvantage = "disadvantage"


class LeaderboardMetric(str, Enum):
    """Counters the stats leaderboard can rank by."""

    messages = "messages"
    rolls = "rolls"
    nat20s = "nat20s"
    damage = "damage"


class Timeframe(str, Enum):
    """Windows the stats leaderboard can cover."""

    daily = "daily"
    weekly = "weekly"
    all = "all"
