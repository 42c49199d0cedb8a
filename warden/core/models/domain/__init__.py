"""Domain models and rules independent of storage and transport."""

from __future__ import annotations

from .enums import LeaderboardMetric, PromptCategory, RollType, Timeframe, TropeCategory
from .mechanics import (
    ABILITY_NAMES,
    DiceRoll,
    InvalidRollError,
    RollResult,
    ability_modifier,
    ability_modifiers,
    is_dice_notation,
    resolve_named_roll,
    resolve_roll,
    roll_dice,
)
from .prompt_time import normalize_prompt_time
from .slugs import slugify, unique_slug

__all__ = [
    "ABILITY_NAMES",
    "DiceRoll",
    "InvalidRollError",
    "LeaderboardMetric",
    "PromptCategory",
    "RollResult",
    "RollType",
    "Timeframe",
    "TropeCategory",
    "ability_modifier",
    "ability_modifiers",
    "is_dice_notation",
    "normalize_prompt_time",
    "resolve_named_roll",
    "resolve_roll",
    "roll_dice",
    "slugify",
    "unique_slug",
]
