"""
Database password rotation tracking.

The date of the last rotation is kept in the ``system_settings`` table. A
rotation is due every 90 days and flagged a week ahead.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import utc_now
from warden.core.database.repositories import SystemSettingsRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.system import PasswordRotationStatus

logger = get_logger(__name__)

ROTATION_SETTING_KEY = "db_password_last_rotated"
ROTATION_INTERVAL_DAYS = 90
WARNING_THRESHOLD_DAYS = 7


def rotation_status(last_rotated: Optional[datetime], now: Optional[datetime] = None) -> PasswordRotationStatus:
    """Compute the rotation status from the last rotation time.

    A password that was never rotated is reported as due and overdue.
    """
    if last_rotated is None:
        return PasswordRotationStatus(last_rotated=None, days_until_rotation=0, needs_rotation=True, overdue=True)

    days_since = ((now or utc_now()) - last_rotated).days
    days_until = ROTATION_INTERVAL_DAYS - days_since
    return PasswordRotationStatus(
        last_rotated=last_rotated,
        days_until_rotation=max(0, days_until),
        needs_rotation=days_until <= WARNING_THRESHOLD_DAYS,
        overdue=days_until <= 0,
    )


async def get_rotation_status(session: AsyncSession) -> PasswordRotationStatus:
    setting = await SystemSettingsRepository(session).get_by_key(ROTATION_SETTING_KEY)
    last_rotated = None
    if setting is not None and setting.value:
        try:
            last_rotated = datetime.fromisoformat(setting.value)
        except ValueError:
            logger.warning(f"Ignoring unreadable {ROTATION_SETTING_KEY} value: {setting.value!r}")
    return rotation_status(last_rotated)


async def record_rotation(session: AsyncSession, rotated_at: Optional[datetime] = None) -> datetime:
    """Store ``rotated_at`` (default now) as the last rotation time."""
    rotated_at = rotated_at or utc_now()
    await SystemSettingsRepository(session).set_value(
        ROTATION_SETTING_KEY,
        rotated_at.isoformat(),
        description="Last time the database password was rotated",
    )
    logger.info(f"Database password rotation recorded at {rotated_at.isoformat()}")
    return rotated_at
