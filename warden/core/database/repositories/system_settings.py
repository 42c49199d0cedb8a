"""
System settings repository.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.system_settings import SystemSetting
from .base import AsyncCrudRepository


class SystemSettingsRepository(AsyncCrudRepository[SystemSetting]):
    """Repository for key/value system settings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SystemSetting)

    async def get_by_key(self, key: str) -> Optional[SystemSetting]:
        stmt = select(SystemSetting).where(SystemSetting.key == key)
        result = await self.session.execute(stmt)
        return result.scalars().one_or_none()

    async def set_value(self, key: str, value: str, description: Optional[str] = None) -> SystemSetting:
        """Insert or overwrite a setting."""
        setting = await self.get_by_key(key)
        if setting is None:
            return await self.create(SystemSetting(key=key, value=value, description=description))
        setting.value = value
        if description is not None:
            setting.description = description
        return await self.update(setting)
