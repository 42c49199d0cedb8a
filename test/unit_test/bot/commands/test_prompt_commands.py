"""Unit tests for the prompt, trope and prompt settings commands."""

from unittest.mock import MagicMock

import pytest

from warden.bot.commands.prompts import PROMPT_SETTINGS_HELP, PromptCommands
from warden.core.database.entities import Prompt, Trope
from warden.core.database.repositories import BotSettingsRepository, PromptRepository, TropeRepository

pytestmark = pytest.mark.asyncio


@pytest.fixture
def cog(session_factory):
    return PromptCommands(MagicMock(), session_factory)


async def seed(session_factory):
    async with session_factory() as session:
        await PromptRepository(session).create(Prompt(category="world", prompt_text="Describe the tavern."))
        await TropeRepository(session).create(
            Trope(name="The Betrayal", description="An ally turns.", category="plot")
        )


class TestPromptCommand:
    async def test_random_prompt_from_any_category(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory)

        await cog.prompt.callback(cog, ctx)

        _, embed = last_reply()
        assert embed.title == "💭 World Prompt"
        assert embed.description == "Describe the tavern."
        assert embed.footer.text.startswith("Prompt #")
        async with session_factory() as session:
            prompt = (await PromptRepository(session).list_by_category("world"))[0]
        assert prompt.use_count == 1

    @pytest.mark.parametrize("args", [("world",), ("random", "world"), ("WORLD",)])
    async def test_category_filter(self, cog, ctx, last_reply, session_factory, args):
        await seed(session_factory)

        await cog.prompt.callback(cog, ctx, *args)

        _, embed = last_reply()
        assert embed.title == "💭 World Prompt"

    async def test_invalid_category_lists_valid_ones(self, cog, ctx, last_reply):
        await cog.prompt.callback(cog, ctx, "random", "romance")

        text, embed = last_reply()
        assert embed is None
        assert text == "❌ Invalid category. Valid categories: character, world, combat, social, plot"

    async def test_empty_category(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory)

        await cog.prompt.callback(cog, ctx, "combat")

        assert last_reply()[0] == '❌ No prompts found for category "combat".'

    async def test_no_prompts_at_all(self, cog, ctx, last_reply):
        await cog.prompt.callback(cog, ctx)

        assert last_reply()[0].startswith("❌ No prompts available")


class TestTropeCommand:
    async def test_random_trope(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory)

        await cog.trope.callback(cog, ctx, "plot")

        _, embed = last_reply()
        assert embed.title == "🎭 The Betrayal"
        assert embed.footer.text == "Plot Trope"
        assert embed.colour.value == 0xE74C3C

    async def test_invalid_trope_category(self, cog, ctx, last_reply):
        await cog.trope.callback(cog, ctx, "romance")

        assert last_reply()[0] == "❌ Invalid category. Valid categories: archetype, dynamic, situation, plot"

    async def test_no_tropes(self, cog, ctx, last_reply):
        await cog.trope.callback(cog, ctx)

        assert last_reply()[0] == "❌ No tropes available."


class TestPromptSettingsCommand:
    async def test_enable_stores_channel_and_normalized_time(self, cog, ctx, last_reply, session_factory):
        await cog.prompt_settings.callback(cog, ctx, "enable", "<#987654>", "9:30")

        assert last_reply()[0].startswith("✅ Daily prompts enabled!")
        async with session_factory() as session:
            settings = await BotSettingsRepository(session).get_by_guild("1111")
        assert settings.daily_prompt_enabled is True
        assert settings.daily_prompt_channel_id == "987654"
        assert settings.daily_prompt_time == "09:30:00"

    async def test_enable_rejects_bad_time(self, cog, ctx, last_reply, session_factory):
        await cog.prompt_settings.callback(cog, ctx, "enable", "<#987654>", "25:00")

        assert last_reply()[0].startswith("❌ Invalid time format")
        async with session_factory() as session:
            assert await BotSettingsRepository(session).get_by_guild("1111") is None

    async def test_enable_rejects_bad_channel(self, cog, ctx, last_reply):
        await cog.prompt_settings.callback(cog, ctx, "enable", "rp-prompts", "09:00")

        assert last_reply()[0] == "❌ Invalid channel mention. Use #channel format."

    async def test_enable_without_arguments_shows_usage(self, cog, ctx, last_reply):
        await cog.prompt_settings.callback(cog, ctx, "enable")

        assert last_reply()[0].startswith("Usage: `!promptsettings enable")

    async def test_disable_and_status(self, cog, ctx, last_reply):
        await cog.prompt_settings.callback(cog, ctx, "enable", "<#987654>", "18:00")

        await cog.prompt_settings.callback(cog, ctx, "status")
        status_text = last_reply()[0]
        assert "Channel: <#987654>" in status_text
        assert "Time: 18:00:00" in status_text
        assert "Last Posted: Never" in status_text

        await cog.prompt_settings.callback(cog, ctx, "disable")
        assert last_reply()[0] == "✅ Daily prompts disabled."

        await cog.prompt_settings.callback(cog, ctx, "status")
        assert last_reply()[0].startswith("❌ Daily prompts are not enabled")

    async def test_unknown_subcommand_shows_help(self, cog, ctx, last_reply):
        await cog.prompt_settings.callback(cog, ctx)

        assert last_reply()[0] == PROMPT_SETTINGS_HELP

    async def test_requires_administrator(self, cog):
        checks = cog.prompt_settings.checks

        assert len(checks) == 2
