"""
Character Statistics Endpoints.

Activity counters and the activity timeline of the caller's characters.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session, utc_now
from warden.core.database.repositories import ActivityFeedRepository, CharacterRepository, CharacterStatsRepository
from warden.core.logging_config import get_logger
from warden.core.models.domain import LeaderboardMetric, Timeframe
from warden.core.models.io.stats import (
    ActivityRead,
    CharacterComparison,
    CharacterStatsRead,
    DamageDistribution,
    LeaderboardEntry,
    LeaderboardResponse,
    StatsOverview,
    StatsRecord,
    StatsRecordResult,
)
from warden.server.services.deps import CurrentUser

logger = get_logger(__name__)

router = APIRouter(tags=["stats"])

METRIC_COUNTERS = {
    LeaderboardMetric.messages: "total_messages",
    LeaderboardMetric.rolls: "total_dice_rolls",
    LeaderboardMetric.nat20s: "nat20_count",
    LeaderboardMetric.damage: "total_damage_dealt",
}

TIMEFRAME_WINDOWS = {
    Timeframe.daily: timedelta(days=1),
    Timeframe.weekly: timedelta(days=7),
}


def _percentage(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


@router.get(
    "/overview",
    response_model=StatsOverview,
    summary="Stats Overview",
    description="Sum the counters of all of the caller's characters.",
)
async def overview(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> StatsOverview:
    character_count = len(await CharacterRepository(session).list_for_user(user.id))
    totals = await CharacterStatsRepository(session).totals_for_user(user.id)
    return StatsOverview(character_count=character_count, **totals)


@router.get(
    "/leaderboard",
    response_model=LeaderboardResponse,
    summary="Leaderboard",
    description="Rank the caller's characters by a metric over a timeframe.",
)
async def leaderboard(
    user: CurrentUser,
    metric: LeaderboardMetric = LeaderboardMetric.messages,
    timeframe: Timeframe = Timeframe.all,
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> LeaderboardResponse:
    window = TIMEFRAME_WINDOWS.get(timeframe)
    since = utc_now() - window if window else None
    rows = await CharacterStatsRepository(session).leaderboard(user.id, METRIC_COUNTERS[metric], since, limit)
    return LeaderboardResponse(
        metric=metric.value,
        timeframe=timeframe.value,
        entries=[LeaderboardEntry(**row) for row in rows],
    )


@router.get(
    "/activity",
    response_model=List[ActivityRead],
    summary="Activity Timeline",
    description="List the newest activity of the caller's characters.",
)
async def activity(
    user: CurrentUser,
    character_id: Optional[int] = None,
    limit: int = Query(default=50, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
) -> List[ActivityRead]:
    rows = await ActivityFeedRepository(session).recent_for_user(user.id, character_id, limit)
    return [
        ActivityRead(
            id=entry.id,
            character_id=entry.character_id,
            character_name=name,
            activity_type=entry.activity_type,
            description=entry.description,
            metadata=entry.activity_metadata,
            timestamp=entry.timestamp,
        )
        for entry, name in rows
    ]


@router.get(
    "/compare",
    response_model=List[CharacterComparison],
    summary="Compare Characters",
    description="Compare the caller's characters, with natural 20 and natural 1 rates in percent.",
)
async def compare(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> List[CharacterComparison]:
    rows = await CharacterStatsRepository(session).per_character_totals(user.id)
    return [
        CharacterComparison(
            **row,
            crit_rate=_percentage(row["nat20_count"], row["total_dice_rolls"]),
            fail_rate=_percentage(row["nat1_count"], row["total_dice_rolls"]),
        )
        for row in rows
    ]


@router.get(
    "/damage-distribution",
    response_model=List[DamageDistribution],
    summary="Damage Distribution",
)
async def damage_distribution(
    user: CurrentUser,
    character_id: Optional[int] = None,
    session: AsyncSession = Depends(get_session),
) -> List[DamageDistribution]:
    rows = await CharacterStatsRepository(session).per_character_totals(user.id, character_id)
    return [
        DamageDistribution(
            character_id=row["character_id"],
            character_name=row["character_name"],
            total_damage=row["total_damage_dealt"],
            total_dice_rolls=row["total_dice_rolls"],
            avg_damage_per_roll=(
                round(row["total_damage_dealt"] / row["total_dice_rolls"], 2) if row["total_dice_rolls"] else 0.0
            ),
        )
        for row in rows
    ]


@router.post(
    "/record",
    response_model=StatsRecordResult,
    summary="Record Activity",
    description="Add to a character's counters in a guild and append an activity feed entry.",
    responses={
        400: {"description": "Counters are inconsistent"},
        404: {"description": "Character not found"},
    },
)
async def record(
    payload: StatsRecord,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> StatsRecordResult:
    """
    Record activity for a character.

    Natural 20s and natural 1s are dice rolls too, so together they cannot
    exceed ``dice_rolls``.
    """
    if await CharacterRepository(session).get_for_user(payload.character_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    if payload.nat20s + payload.nat1s > payload.dice_rolls:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="nat20s and nat1s together cannot exceed dice_rolls",
        )

    stats = await CharacterStatsRepository(session).increment(
        payload.character_id,
        payload.guild_id,
        messages=payload.messages,
        dice_rolls=payload.dice_rolls,
        nat20s=payload.nat20s,
        nat1s=payload.nat1s,
        damage=payload.damage,
    )
    description = payload.description or (
        f"{payload.messages} messages, {payload.dice_rolls} rolls, {payload.damage} damage"
    )
    entry = await ActivityFeedRepository(session).add(
        payload.character_id,
        payload.activity_type or "stats",
        description,
        payload.metadata,
    )
    logger.debug(f"Recorded activity for character {payload.character_id} in guild {payload.guild_id}")
    return StatsRecordResult(stats=CharacterStatsRead.model_validate(stats), activity_id=entry.id)
