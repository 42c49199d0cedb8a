"""Unit tests for the daily prompt scheduler."""

from datetime import datetime
from unittest.mock import patch

import pytest

from warden.bot.scheduler import (
    EMBED_COLOR,
    EMBED_FOOTER,
    EMBED_TITLE,
    JOB_ID,
    PromptScheduler,
    build_daily_prompt_embed,
    check_and_post_daily_prompts,
    local_window,
)
from warden.core.database.entities import Prompt
from warden.core.database.repositories import BotSettingsRepository, PromptRepository

NOW = datetime(2026, 3, 1, 9, 0, 30)


class FakePoster:
    """Channel poster that records embeds instead of talking to Discord."""

    def __init__(self, missing=(), failing=()):
        self.missing = set(missing)
        self.failing = set(failing)
        self.posts = []

    async def post_embed(self, channel_id, embed):
        if channel_id in self.failing:
            raise RuntimeError("Discord is down")
        if channel_id in self.missing:
            return False
        self.posts.append((channel_id, embed))
        return True


async def enable_guild(session_factory, guild_id, channel_id="100", prompt_time="09:00:00", **values):
    async with session_factory() as session:
        return await BotSettingsRepository(session).upsert(
            guild_id,
            daily_prompt_enabled=True,
            daily_prompt_channel_id=channel_id,
            daily_prompt_time=prompt_time,
            **values,
        )


async def add_prompt(session_factory, text="Describe your character's morning routine.", category="character"):
    async with session_factory() as session:
        return await PromptRepository(session).create(Prompt(category=category, prompt_text=text))


class TestLocalWindow:
    def test_utc(self):
        current_time, day_start = local_window(datetime(2026, 3, 1, 9, 5, 59), "UTC")

        assert current_time == "09:05:00"
        assert day_start == datetime(2026, 3, 1, 0, 0)

    def test_other_timezone_uses_local_clock_and_midnight(self):
        # 02:30 UTC is 21:30 the previous day in New York (EST, UTC-5)
        current_time, day_start = local_window(datetime(2026, 3, 1, 2, 30), "America/New_York")

        assert current_time == "21:30:00"
        assert day_start == datetime(2026, 2, 28, 5, 0)


class TestBuildDailyPromptEmbed:
    def test_embed_layout(self):
        prompt = Prompt(id=7, category="world", prompt_text="Describe the local tavern.")

        embed = build_daily_prompt_embed(prompt, NOW)

        assert embed["title"] == EMBED_TITLE == "📝 Daily Roleplay Prompt"
        assert embed["description"] == "Describe the local tavern."
        assert embed["color"] == EMBED_COLOR == 0x9B59B6
        assert embed["fields"] == [{"name": "Category", "value": "World", "inline": True}]
        assert embed["footer"]["text"] == EMBED_FOOTER
        assert embed["timestamp"].startswith("2026-03-01T09:00:30")


@pytest.mark.asyncio
class TestCheckAndPostDailyPrompts:
    async def test_posts_once_and_records_usage(self, session_factory):
        await enable_guild(session_factory, "guild-1", channel_id="100")
        prompt = await add_prompt(session_factory)
        poster = FakePoster()

        posted = await check_and_post_daily_prompts(session_factory, poster, NOW)

        assert posted == 1
        assert [channel for channel, _ in poster.posts] == ["100"]
        async with session_factory() as session:
            settings = await BotSettingsRepository(session).get_by_guild("guild-1")
            used = await PromptRepository(session).get_by_id(prompt.id)
        assert settings.last_prompt_posted == NOW
        assert used.use_count == 1
        assert used.last_used == NOW

    async def test_second_run_same_day_posts_nothing(self, session_factory):
        await enable_guild(session_factory, "guild-1")
        await add_prompt(session_factory)
        poster = FakePoster()

        await check_and_post_daily_prompts(session_factory, poster, NOW)
        posted = await check_and_post_daily_prompts(session_factory, poster, NOW.replace(second=50))

        assert posted == 0
        assert len(poster.posts) == 1

    async def test_posts_again_the_next_day(self, session_factory):
        await enable_guild(session_factory, "guild-1", last_prompt_posted=datetime(2026, 2, 28, 9, 0))
        await add_prompt(session_factory)

        assert await check_and_post_daily_prompts(session_factory, FakePoster(), NOW) == 1

    async def test_not_due_at_other_minutes(self, session_factory):
        await enable_guild(session_factory, "guild-1", prompt_time="10:00:00")
        await add_prompt(session_factory)
        poster = FakePoster()

        assert await check_and_post_daily_prompts(session_factory, poster, NOW) == 0
        assert poster.posts == []

    async def test_skips_guild_without_channel(self, session_factory):
        await enable_guild(session_factory, "guild-1", channel_id=None)
        await add_prompt(session_factory)

        assert await check_and_post_daily_prompts(session_factory, FakePoster(), NOW) == 0

    async def test_skips_when_no_prompts_exist(self, session_factory):
        await enable_guild(session_factory, "guild-1")

        assert await check_and_post_daily_prompts(session_factory, FakePoster(), NOW) == 0

    async def test_missing_channel_leaves_no_usage_update(self, session_factory):
        await enable_guild(session_factory, "guild-1", channel_id="404")
        prompt = await add_prompt(session_factory)

        posted = await check_and_post_daily_prompts(session_factory, FakePoster(missing={"404"}), NOW)

        assert posted == 0
        async with session_factory() as session:
            settings = await BotSettingsRepository(session).get_by_guild("guild-1")
            unused = await PromptRepository(session).get_by_id(prompt.id)
        assert settings.last_prompt_posted is None
        assert unused.use_count == 0

    async def test_failure_in_one_guild_does_not_stop_others(self, session_factory):
        await enable_guild(session_factory, "broken", channel_id="500")
        await enable_guild(session_factory, "healthy", channel_id="200")
        await add_prompt(session_factory)
        poster = FakePoster(failing={"500"})

        posted = await check_and_post_daily_prompts(session_factory, poster, NOW)

        assert posted == 1
        assert [channel for channel, _ in poster.posts] == ["200"]

    async def test_query_failure_is_logged_not_raised(self, session_factory):
        with patch.object(BotSettingsRepository, "list_due_for_daily_prompt", side_effect=RuntimeError("db down")):
            assert await check_and_post_daily_prompts(session_factory, FakePoster(), NOW) == 0


@pytest.mark.asyncio
class TestPromptScheduler:
    async def test_start_registers_single_job(self, session_factory):
        scheduler = PromptScheduler(FakePoster(), session_factory=session_factory)
        try:
            scheduler.start()
            scheduler.start()

            assert scheduler.running
            jobs = scheduler._scheduler.get_jobs()
            assert [job.id for job in jobs] == [JOB_ID]
            assert jobs[0].max_instances == 1
            assert jobs[0].coalesce is True
        finally:
            scheduler.shutdown()

        assert not scheduler.running

    async def test_shutdown_without_start_is_noop(self, session_factory):
        scheduler = PromptScheduler(FakePoster(), session_factory=session_factory)

        scheduler.shutdown()

        assert not scheduler.running

    async def test_run_once_uses_configured_timezone(self, session_factory):
        await enable_guild(session_factory, "guild-1", prompt_time="10:00:00")
        await add_prompt(session_factory)
        poster = FakePoster()
        scheduler = PromptScheduler(poster, session_factory=session_factory, timezone_name="Europe/Paris")

        # 09:00 UTC is 10:00 in Paris in March (CET, UTC+1)
        posted = await scheduler.run_once(NOW)

        assert posted == 1
        assert len(poster.posts) == 1
