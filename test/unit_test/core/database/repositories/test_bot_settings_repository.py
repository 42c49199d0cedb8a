"""Unit tests for the guild bot settings repository."""

from datetime import datetime

import pytest

from warden.core.database.repositories import BotSettingsRepository

pytestmark = pytest.mark.asyncio

DAY_START = datetime(2026, 3, 1, 0, 0)


class TestUpsert:
    async def test_creates_row_on_first_use(self, in_memory_session):
        repo = BotSettingsRepository(in_memory_session)

        settings = await repo.upsert("guild-1", daily_prompt_enabled=True, daily_prompt_channel_id="42")

        assert settings.id is not None
        assert settings.daily_prompt_enabled is True
        assert settings.daily_prompt_time == "09:00:00"

    async def test_updates_only_given_columns(self, in_memory_session):
        repo = BotSettingsRepository(in_memory_session)
        await repo.upsert("guild-1", daily_prompt_enabled=True, daily_prompt_channel_id="42")

        settings = await repo.upsert("guild-1", daily_prompt_time="18:30:00")

        assert settings.daily_prompt_channel_id == "42"
        assert settings.daily_prompt_time == "18:30:00"
        assert await repo.count() == 1


class TestListDueForDailyPrompt:
    async def _seed(self, repo):
        await repo.upsert("due", daily_prompt_enabled=True, daily_prompt_channel_id="1", daily_prompt_time="09:00:00")
        await repo.upsert(
            "posted-yesterday",
            daily_prompt_enabled=True,
            daily_prompt_channel_id="2",
            daily_prompt_time="09:00:00",
            last_prompt_posted=datetime(2026, 2, 28, 9, 0),
        )
        await repo.upsert(
            "posted-today",
            daily_prompt_enabled=True,
            daily_prompt_channel_id="3",
            daily_prompt_time="09:00:00",
            last_prompt_posted=datetime(2026, 3, 1, 9, 0),
        )
        await repo.upsert("disabled", daily_prompt_enabled=False, daily_prompt_time="09:00:00")
        await repo.upsert("other-time", daily_prompt_enabled=True, daily_prompt_time="10:00:00")

    async def test_returns_enabled_guilds_not_posted_today(self, in_memory_session):
        repo = BotSettingsRepository(in_memory_session)
        await self._seed(repo)

        due = await repo.list_due_for_daily_prompt("09:00:00", DAY_START)

        assert [settings.guild_id for settings in due] == ["due", "posted-yesterday"]

    async def test_nothing_due_at_other_minutes(self, in_memory_session):
        repo = BotSettingsRepository(in_memory_session)
        await self._seed(repo)

        assert await repo.list_due_for_daily_prompt("09:01:00", DAY_START) == []

    async def test_mark_prompt_posted_removes_guild_from_due_list(self, in_memory_session):
        repo = BotSettingsRepository(in_memory_session)
        await self._seed(repo)
        settings = await repo.get_by_guild("due")

        await repo.mark_prompt_posted(settings, datetime(2026, 3, 1, 9, 0))

        due = await repo.list_due_for_daily_prompt("09:00:00", DAY_START)
        assert [s.guild_id for s in due] == ["posted-yesterday"]
