"""
Roleplay Prompt Endpoints.

Manage the prompt pool used by ``!prompt`` and the daily prompt scheduler,
and the optional per-channel prompt schedule.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import Prompt, PromptSchedule
from warden.core.database.repositories import PromptRepository, PromptScheduleRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.prompts import (
    CategorySummary,
    PromptCreate,
    PromptRead,
    ScheduleCreate,
    ScheduleRead,
)
from warden.server.services.deps import CurrentUser

logger = get_logger(__name__)

router = APIRouter(tags=["prompts"])

ALL_CATEGORIES = "all"


@router.get(
    "",
    response_model=List[PromptRead],
    summary="List Prompts",
    description="List prompts newest first. A category of 'all' or none returns every prompt.",
)
async def list_prompts(
    user: CurrentUser,
    category: Optional[str] = Query(default=None, description="Prompt category, or 'all'"),
    session: AsyncSession = Depends(get_session),
) -> List[PromptRead]:
    if category == ALL_CATEGORIES:
        category = None
    prompts = await PromptRepository(session).list_by_category(category)
    return [PromptRead.model_validate(prompt) for prompt in prompts]


@router.get(
    "/categories",
    response_model=List[CategorySummary],
    summary="Prompt Categories",
    description="Count prompts and their total uses per category.",
)
async def prompt_categories(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> List[CategorySummary]:
    summary = await PromptRepository(session).category_summary()
    return [CategorySummary(category=category, count=count, total_uses=total) for category, count, total in summary]


@router.get(
    "/popular",
    response_model=List[PromptRead],
    summary="Popular Prompts",
    description="List the most used prompts.",
)
async def popular_prompts(
    user: CurrentUser,
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
) -> List[PromptRead]:
    prompts = await PromptRepository(session).most_used(limit)
    return [PromptRead.model_validate(prompt) for prompt in prompts]


@router.get(
    "/schedule",
    response_model=List[ScheduleRead],
    summary="List Prompt Schedule",
)
async def list_schedule(
    user: CurrentUser,
    guild_id: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
) -> List[ScheduleRead]:
    schedules = await PromptScheduleRepository(session).list_for_guild(guild_id)
    return [ScheduleRead.model_validate(schedule) for schedule in schedules]


@router.post(
    "/schedule",
    response_model=ScheduleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Prompt Schedule",
    description="Schedule prompts for a channel at a 24h time, optionally from one category.",
)
async def create_schedule(
    payload: ScheduleCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> ScheduleRead:
    schedule = await PromptScheduleRepository(session).create(
        PromptSchedule(
            guild_id=payload.guild_id,
            channel_id=payload.channel_id,
            schedule_time=payload.schedule_time,
            category=payload.category.value if payload.category else None,
            is_active=payload.is_active,
        )
    )
    return ScheduleRead.model_validate(schedule)


@router.delete(
    "/schedule/{schedule_id}",
    summary="Delete Prompt Schedule",
    responses={404: {"description": "Schedule not found"}},
)
async def delete_schedule(
    schedule_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    if not await PromptScheduleRepository(session).delete(schedule_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    return {"success": True}


@router.post(
    "",
    response_model=PromptRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Prompt",
)
async def create_prompt(
    payload: PromptCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> PromptRead:
    prompt = await PromptRepository(session).create(
        Prompt(category=payload.category.value, prompt_text=payload.prompt_text, created_by=user.id)
    )
    logger.info(f"User {user.id} added {prompt.category} prompt {prompt.id}")
    return PromptRead.model_validate(prompt)


@router.put(
    "/{prompt_id}",
    response_model=PromptRead,
    summary="Update Prompt",
    responses={404: {"description": "Prompt not found"}},
)
async def update_prompt(
    prompt_id: int,
    payload: PromptCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> PromptRead:
    repo = PromptRepository(session)
    prompt = await repo.get_by_id(prompt_id)
    if prompt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found")
    prompt.category = payload.category.value
    prompt.prompt_text = payload.prompt_text
    prompt = await repo.update(prompt)
    return PromptRead.model_validate(prompt)


@router.delete(
    "/{prompt_id}",
    summary="Delete Prompt",
    responses={404: {"description": "Prompt not found"}},
)
async def delete_prompt(
    prompt_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    if not await PromptRepository(session).delete(prompt_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found")
    return {"success": True}
