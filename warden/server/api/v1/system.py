"""
System Status Endpoints.

Service health including the database and Discord bot, and database password
rotation tracking.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session, utc_now
from warden.core.logging_config import get_logger
from warden.core.models.io.admin import MessageResponse
from warden.core.models.io.system import PasswordRotationStatus, SystemHealth
from warden.server.core import constant
from warden.server.services.deps import AdminUser, CurrentUser
from warden.server.services.password_rotation import (
    ROTATION_INTERVAL_DAYS,
    get_rotation_status,
    record_rotation,
)

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


def _bot_state(request: Request) -> str:
    bot = getattr(request.app.state, "bot", None)
    if bot is None:
        return "disabled"
    return "connected" if bot.is_ready() else "connecting"


@router.get(
    "/health",
    response_model=SystemHealth,
    summary="System Health",
    description="Report database connectivity and Discord bot state.",
)
async def system_health(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> SystemHealth:
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database = "unavailable"
    return SystemHealth(
        status="ok" if database == "ok" else "degraded",
        database=database,
        bot=_bot_state(request),
        version=constant.VERSION,
        timestamp=utc_now(),
    )


@router.get(
    "/password-rotation-status",
    response_model=PasswordRotationStatus,
    summary="Password Rotation Status",
    description=f"Check whether the database password is due for its {ROTATION_INTERVAL_DAYS}-day rotation.",
)
async def password_rotation_status(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> PasswordRotationStatus:
    return await get_rotation_status(session)


@router.post(
    "/record-password-rotation",
    response_model=MessageResponse,
    summary="Record Password Rotation",
    description="Record that the database password was rotated now.",
    responses={403: {"description": "Admin access required"}},
)
async def record_password_rotation(
    admin: AdminUser,
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    await record_rotation(session)
    return MessageResponse(
        message=f"Password rotation date recorded. Next rotation due in {ROTATION_INTERVAL_DAYS} days."
    )
