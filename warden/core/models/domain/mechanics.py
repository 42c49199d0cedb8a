"""
Character sheet dice mechanics.

Pure functions over a character sheet: ability modifiers and d20 roll
resolution. Random numbers come from an injectable ``random.Random`` so
callers (and tests) can make rolls deterministic.
"""

from __future__ import annotations

import random
import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from .enums import RollType

ABILITY_NAMES = ("strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma")

SAVE_ATTRIBUTES = {
    "fortitude": "fortitude_save",
    "reflex": "reflex_save",
    "will": "will_save",
}


class InvalidRollError(ValueError):
    """Raised when a roll request names an unknown stat, save or nothing at all."""


class RollResult(BaseModel):
    """Outcome of a single resolved roll."""

    description: str
    dice_roll: int = Field(ge=1, le=20, description="The d20 result that was kept")
    rolls: List[int] = Field(description="Every d20 rolled, in order")
    modifier: int
    total: int

    @property
    def natural_20(self) -> bool:
        return self.dice_roll == 20

    @property
    def natural_1(self) -> bool:
        return self.dice_roll == 1


def ability_modifier(score: int) -> int:
    """Return the ability modifier for a score: ``floor((score - 10) / 2)``."""
    return (score - 10) // 2


def ability_modifiers(sheet: Any) -> Dict[str, int]:
    """Compute the modifier of all six abilities of a sheet."""
    return {name: ability_modifier(getattr(sheet, name)) for name in ABILITY_NAMES}


def roll_d20(rng: Optional[random.Random] = None) -> int:
    return (rng or random).randint(1, 20)


def _ability_modifier_for(sheet: Any, stat: Optional[str]) -> int:
    if not stat:
        return 0
    if stat not in ABILITY_NAMES:
        raise InvalidRollError("Invalid stat name")
    return ability_modifier(getattr(sheet, stat))


def _skill_modifier(skills: Mapping[str, Any], skill_name: str) -> Optional[int]:
    skill = skills.get(skill_name)
    if not isinstance(skill, Mapping) or skill.get("total") is None:
        return None
    try:
        return int(skill["total"])
    except (TypeError, ValueError):
        # Free-form sheet data; an unreadable total counts as missing
        return None


def resolve_roll(
    sheet: Any,
    stat: Optional[str] = None,
    roll_type: RollType = RollType.ability,
    skill_name: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> RollResult:
    """
    Resolve a d20 roll against a character sheet.

    Args:
        sheet: Object exposing ability scores, saves and a ``skills`` mapping
        stat: Ability name, or save name for ``save`` rolls
        roll_type: Kind of roll
        skill_name: Skill to use for ``skill`` rolls
        rng: Random source

    Returns:
        The resolved RollResult

    Raises:
        InvalidRollError: Neither a stat nor a skill was given, or the stat is unknown.
    """
    if not stat and not skill_name:
        raise InvalidRollError("Stat name or skill name is required")

    if roll_type in (RollType.advantage, RollType.disadvantage):
        first, second = roll_d20(rng), roll_d20(rng)
        kept = max(first, second) if roll_type == RollType.advantage else min(first, second)
        modifier = _ability_modifier_for(sheet, stat)
        label = "Advantage" if roll_type == RollType.advantage else "Disadvantage"
        return RollResult(
            description=f"{label} ({first}, {second})",
            dice_roll=kept,
            rolls=[first, second],
            modifier=modifier,
            total=kept + modifier,
        )

    if roll_type == RollType.skill and skill_name:
        dice = roll_d20(rng)
        modifier = _skill_modifier(sheet.skills or {}, skill_name)
        if modifier is None:
            modifier = _ability_modifier_for(sheet, stat)
        return RollResult(
            description=f"{skill_name} check",
            dice_roll=dice,
            rolls=[dice],
            modifier=modifier,
            total=dice + modifier,
        )

    if roll_type == RollType.save:
        attribute = SAVE_ATTRIBUTES.get((stat or "").lower())
        if attribute is None:
            raise InvalidRollError("Invalid save name")
        dice = roll_d20(rng)
        modifier = getattr(sheet, attribute) or 0
        return RollResult(
            description=f"{stat.capitalize()} save",
            dice_roll=dice,
            rolls=[dice],
            modifier=modifier,
            total=dice + modifier,
        )

    modifier = _ability_modifier_for(sheet, stat)
    dice = roll_d20(rng)
    return RollResult(
        description=f"{stat.upper()} check" if stat else "Check",
        dice_roll=dice,
        rolls=[dice],
        modifier=modifier,
        total=dice + modifier,
    )


DICE_PATTERN = re.compile(r"^(\d+)?d(\d+)([+-]\d+)?$", re.IGNORECASE)
MAX_DICE = 100
MAX_SIDES = 1000


class DiceRoll(BaseModel):
    """Outcome of free dice notation such as ``2d6+3``."""

    count: int
    sides: int
    modifier: int
    rolls: List[int]

    @property
    def total(self) -> int:
        return sum(self.rolls) + self.modifier

    @property
    def notation(self) -> str:
        suffix = f"{self.modifier:+d}" if self.modifier else ""
        return f"{self.count}d{self.sides}{suffix}"


def is_dice_notation(text: str) -> bool:
    return DICE_PATTERN.match(text.strip()) is not None


def roll_dice(notation: str, rng: Optional[random.Random] = None) -> DiceRoll:
    """
    Roll dice notation: ``d20``, ``1d20+5``, ``2d6-1``.

    Raises:
        InvalidRollError: The notation is malformed or out of range.
    """
    match = DICE_PATTERN.match(notation.strip())
    if match is None:
        raise InvalidRollError(f"Invalid dice notation: {notation}")
    count = int(match.group(1) or 1)
    sides = int(match.group(2))
    modifier = int(match.group(3) or 0)
    if not 1 <= count <= MAX_DICE:
        raise InvalidRollError(f"Number of dice must be between 1 and {MAX_DICE}")
    if not 2 <= sides <= MAX_SIDES:
        raise InvalidRollError(f"Die size must be between 2 and {MAX_SIDES}")
    source = rng or random
    return DiceRoll(
        count=count,
        sides=sides,
        modifier=modifier,
        rolls=[source.randint(1, sides) for _ in range(count)],
    )


def resolve_named_roll(sheet: Any, text: str, rng: Optional[random.Random] = None) -> RollResult:
    """
    Resolve a roll named in free text against a sheet.

    An ability name anywhere in the text makes an ability check; ``fort``,
    ``ref`` and ``will`` make saves; anything else is matched against the
    sheet's skill names, case-insensitively by substring.

    Raises:
        InvalidRollError: No ability, save or skill matches.
    """
    wanted = text.strip().lower()
    ability = next((name for name in ABILITY_NAMES if name in wanted), None)
    if ability is not None:
        return resolve_roll(sheet, ability, RollType.ability, rng=rng)
    if "fortitude" in wanted or wanted == "fort":
        return resolve_roll(sheet, "fortitude", RollType.save, rng=rng)
    if "reflex" in wanted or wanted == "ref":
        return resolve_roll(sheet, "reflex", RollType.save, rng=rng)
    if "will" in wanted:
        return resolve_roll(sheet, "will", RollType.save, rng=rng)

    skill_name = next((name for name in (sheet.skills or {}) if wanted and wanted in name.lower()), None)
    if skill_name is None:
        raise InvalidRollError(f'Skill "{text}" not found on {sheet.name}')
    return resolve_roll(sheet, None, RollType.skill, skill_name, rng=rng)
