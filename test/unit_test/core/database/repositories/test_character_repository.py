"""Unit tests for character, memory and channel mapping repositories."""

import pytest

from warden.core.database.entities import CharacterMemory
from warden.core.database.repositories import (
    ChannelMappingRepository,
    CharacterMemoryRepository,
    CharacterRepository,
)

pytestmark = pytest.mark.asyncio


class TestCharacterRepository:
    async def test_get_for_user_is_owner_scoped(self, in_memory_session, user, make_character):
        hero = await make_character(user.id, "Hero")
        repo = CharacterRepository(in_memory_session)

        assert (await repo.get_for_user(hero.id, user.id)).name == "Hero"
        assert await repo.get_for_user(hero.id, user.id + 1) is None

    async def test_slug_in_use_can_exclude_self(self, in_memory_session, user, make_character):
        hero = await make_character(user.id, "Hero", is_public=True, public_slug="hero")
        repo = CharacterRepository(in_memory_session)

        assert await repo.slug_in_use("hero") is True
        assert await repo.slug_in_use("hero", exclude_id=hero.id) is False
        assert await repo.slug_in_use("villain") is False

    async def test_public_lookup_and_listing(self, in_memory_session, user, make_character):
        await make_character(user.id, "Popular", is_public=True, public_slug="popular", public_views=10)
        await make_character(user.id, "Quiet", is_public=True, public_slug="quiet", public_views=1)
        await make_character(user.id, "Hidden", is_public=False, public_slug="hidden")
        repo = CharacterRepository(in_memory_session)

        assert [c.name for c in await repo.list_public()] == ["Popular", "Quiet"]
        assert (await repo.get_public_by_slug("quiet")).name == "Quiet"
        assert await repo.get_public_by_slug("hidden") is None

    async def test_find_by_name_exact_or_partial(self, in_memory_session, user, make_character):
        hero = await make_character(user.id, "Hero of Kvatch")
        repo = CharacterRepository(in_memory_session)

        assert (await repo.find_by_name(user.id, "  hero of KVATCH ")).id == hero.id
        assert await repo.find_by_name(user.id, "kvatch") is None
        assert (await repo.find_by_name(user.id, "kvatch", partial=True)).id == hero.id
        assert await repo.find_by_name(user.id + 1, "Hero of Kvatch") is None


class TestCharacterMemoryRepository:
    async def test_list_for_character_newest_first(self, in_memory_session, user, make_character):
        hero = await make_character(user.id, "Hero")
        repo = CharacterMemoryRepository(in_memory_session)
        await repo.create(CharacterMemory(character_id=hero.id, guild_id="web", memory="First"))
        await repo.create(CharacterMemory(character_id=hero.id, guild_id="web", memory="Second"))

        assert [m.memory for m in await repo.list_for_character(hero.id)] == ["Second", "First"]


class TestChannelMappingRepository:
    async def test_assign_replaces_existing_mapping(self, in_memory_session, user, make_character):
        hero = await make_character(user.id, "Hero")
        rogue = await make_character(user.id, "Rogue")
        repo = ChannelMappingRepository(in_memory_session)

        await repo.assign("guild-1", "chan-1", user.id, hero.id)
        mapping = await repo.assign("guild-1", "chan-1", user.id, rogue.id)

        assert mapping.character_id == rogue.id
        assert await repo.count() == 1
        assert (await repo.get_for_channel("guild-1", "chan-1", user.id)).character_id == rogue.id
