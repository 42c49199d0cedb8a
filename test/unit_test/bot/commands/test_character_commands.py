"""Unit tests for the character link and roll commands."""

from unittest.mock import MagicMock, patch

import pytest

from warden.bot.commands.characters import NO_CHARACTER, NOT_LINKED, ROLL_USAGE, CharacterCommands
from warden.core.database.entities import CharacterSheet, User
from warden.core.database.repositories import (
    ActivityFeedRepository,
    ChannelMappingRepository,
    CharacterStatsRepository,
)

pytestmark = pytest.mark.asyncio

RANDINT = "warden.core.models.domain.mechanics.random.randint"


@pytest.fixture
def cog(session_factory):
    return CharacterCommands(MagicMock(), session_factory)


async def seed(session_factory, link_channel=True):
    """Store a Discord-linked user owning Ogun, optionally mapped to the test channel."""
    async with session_factory() as session:
        user = User(username="alice", password="hash", discord_user_id="3333")
        session.add(user)
        await session.commit()
        await session.refresh(user)
        character = CharacterSheet(
            user_id=user.id,
            name="Ogun",
            character_class="Fighter",
            level=3,
            strength=16,
            skills={"Perception": {"total": 6}},
        )
        session.add(character)
        await session.commit()
        await session.refresh(character)
        if link_channel:
            await ChannelMappingRepository(session).assign("1111", "2222", user.id, character.id)
    return user, character


class TestSetCharCommand:
    async def test_links_character_by_name_ignoring_case(self, cog, ctx, last_reply, session_factory):
        user, character = await seed(session_factory, link_channel=False)

        await cog.set_char.callback(cog, ctx, name="ogun")

        text, _ = last_reply()
        assert text == "✅ This channel is now linked to **Ogun**! Rolls will use this character."
        async with session_factory() as session:
            mapping = await ChannelMappingRepository(session).get_for_channel("1111", "2222", user.id)
        assert mapping.character_id == character.id

    async def test_without_name_shows_usage(self, cog, ctx, last_reply):
        await cog.set_char.callback(cog, ctx, name="  ")

        text, _ = last_reply()
        assert text.startswith("Usage: `!setchar <character_name>`")

    async def test_unlinked_discord_account(self, cog, ctx, last_reply):
        await cog.set_char.callback(cog, ctx, name="Ogun")

        text, _ = last_reply()
        assert text == NOT_LINKED

    async def test_unknown_character(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory, link_channel=False)

        await cog.set_char.callback(cog, ctx, name="Zed")

        text, _ = last_reply()
        assert text == '❌ Character "Zed" not found. Check spelling and try again.'

    async def test_other_users_characters_are_not_found(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory, link_channel=False)
        ctx.author.id = 4444
        async with session_factory() as session:
            session.add(User(username="bob", password="hash", discord_user_id="4444"))
            await session.commit()

        await cog.set_char.callback(cog, ctx, name="Ogun")

        text, _ = last_reply()
        assert text.startswith('❌ Character "Ogun" not found.')


class TestCharCommand:
    async def test_shows_linked_character(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory)

        await cog.show_char.callback(cog, ctx)

        text, _ = last_reply()
        assert text == "📋 This channel is linked to **Ogun** (Level 3 Fighter)"

    async def test_without_mapping(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory, link_channel=False)

        await cog.show_char.callback(cog, ctx)

        text, _ = last_reply()
        assert text == "❌ No character is linked to this channel. Use `!setchar <name>` to link one."


class TestRollCommand:
    async def test_without_target_shows_usage(self, cog, ctx, last_reply):
        await cog.roll.callback(cog, ctx)

        text, _ = last_reply()
        assert text == ROLL_USAGE

    async def test_dice_notation_needs_no_character(self, cog, ctx, last_reply):
        with patch(RANDINT, side_effect=[2, 5]):
            await cog.roll.callback(cog, ctx, target="2d6+3")

        _, embed = last_reply()
        assert embed.title == "🎲 Dice Roll"
        assert "Rolls: [2, 5] = 7" in embed.description
        assert "Modifier: +3" in embed.description
        assert "**Total: 10**" in embed.description
        assert len(embed.fields) == 0

    async def test_single_die_at_maximum_is_flagged(self, cog, ctx, last_reply):
        with patch(RANDINT, return_value=20):
            await cog.roll.callback(cog, ctx, target="d20")

        _, embed = last_reply()
        assert embed.fields[0].value == "Natural 20!"
        assert embed.color.value == 0x00FF00

    async def test_out_of_range_dice(self, cog, ctx, last_reply):
        await cog.roll.callback(cog, ctx, target="500d6")

        text, _ = last_reply()
        assert text == "❌ Number of dice must be between 1 and 100"

    async def test_ability_roll_records_stats_and_activity(self, cog, ctx, last_reply, session_factory):
        _, character = await seed(session_factory)

        with patch(RANDINT, return_value=20):
            await cog.roll.callback(cog, ctx, target="strength")

        _, embed = last_reply()
        assert embed.title == "🎲 Ogun - STRENGTH check"
        assert embed.description == "**20** +3 = **23**"
        assert embed.fields[0].name == "🎉"
        async with session_factory() as session:
            stats = await CharacterStatsRepository(session).get_for_guild(character.id, "1111")
            feed = await ActivityFeedRepository(session).recent(character.id)
        assert stats.total_dice_rolls == 1
        assert stats.nat20_count == 1
        assert stats.nat1_count == 0
        assert feed[0].activity_type == "roll"
        assert feed[0].description == "Rolled STRENGTH check: 23"
        assert feed[0].activity_metadata["guild_id"] == "1111"
        assert feed[0].activity_metadata["nat20"] is True

    async def test_skill_roll_counts_natural_one(self, cog, ctx, last_reply, session_factory):
        _, character = await seed(session_factory)

        with patch(RANDINT, return_value=1):
            await cog.roll.callback(cog, ctx, target="percep")

        _, embed = last_reply()
        assert embed.title == "🎲 Ogun - Perception check"
        assert embed.fields[0].name == "💀"
        async with session_factory() as session:
            stats = await CharacterStatsRepository(session).get_for_guild(character.id, "1111")
        assert stats.nat1_count == 1

    async def test_unknown_skill(self, cog, ctx, last_reply, session_factory):
        _, character = await seed(session_factory)

        await cog.roll.callback(cog, ctx, target="juggling")

        text, _ = last_reply()
        assert text == '❌ Skill "juggling" not found on Ogun.'
        async with session_factory() as session:
            assert await CharacterStatsRepository(session).get_for_guild(character.id, "1111") is None

    async def test_stat_roll_without_mapping(self, cog, ctx, last_reply, session_factory):
        await seed(session_factory, link_channel=False)

        await cog.roll.callback(cog, ctx, target="will")

        text, _ = last_reply()
        assert text == NO_CHARACTER

    async def test_stat_roll_in_direct_message(self, cog, ctx, last_reply):
        ctx.guild = None

        await cog.roll.callback(cog, ctx, target="strength")

        text, _ = last_reply()
        assert text == "❌ Character rolls can only be used in a server."
