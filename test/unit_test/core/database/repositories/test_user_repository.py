"""Unit tests for the user repository."""

import pytest

from warden.core.database.entities import Document, User
from warden.core.database.repositories import CharacterRepository, DocumentRepository, UserRepository

pytestmark = pytest.mark.asyncio


class TestUserRepository:
    async def test_get_by_username_ignores_case(self, in_memory_session, user):
        repo = UserRepository(in_memory_session)

        assert (await repo.get_by_username("ALICE")).id == user.id
        assert await repo.get_by_username("nobody") is None

    async def test_get_by_discord_id(self, in_memory_session, user):
        repo = UserRepository(in_memory_session)
        user.discord_user_id = "123456"
        await repo.update(user)

        assert (await repo.get_by_discord_id("123456")).id == user.id
        assert await repo.get_by_discord_id("999") is None

    async def test_list_with_counts(self, in_memory_session, user, make_character):
        await make_character(user.id, "Hero")
        await make_character(user.id, "Rogue")
        await DocumentRepository(in_memory_session).create(Document(name="Notes", user_id=user.id))
        other = await UserRepository(in_memory_session).create(User(username="bob", password="hash"))

        listed = await UserRepository(in_memory_session).list_with_counts()
        rows = {u.username: (characters, documents) for u, characters, documents in listed}

        assert rows == {"alice": (2, 1), "bob": (0, 0)}
        assert other.id is not None

    async def test_delete_with_content(self, in_memory_session, user, make_character):
        await make_character(user.id, "Hero")
        await DocumentRepository(in_memory_session).create(Document(name="Notes", user_id=user.id))
        user_id = user.id

        await UserRepository(in_memory_session).delete_with_content(user)

        assert await UserRepository(in_memory_session).get_by_id(user_id) is None
        assert await CharacterRepository(in_memory_session).list_for_user(user_id) == []
        assert await DocumentRepository(in_memory_session).list_children(user_id) == []
