from unittest.mock import patch

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

SHEET = {
    "name": "Aria Windwhisper",
    "strength": 8,
    "dexterity": 16,
    "wisdom": 14,
    "character_class": "Ranger",
    "level": 3,
    "will_save": 4,
    "skills": {"perception": {"total": 7}},
    "secret": "Heir to the fallen kingdom",
}


async def create_character(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/characters", json={**SHEET, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestCharacterCrud:
    async def test_requires_login(self, anon_client: AsyncClient):
        response = await anon_client.get("/api/characters")

        assert response.status_code == 401

    async def test_create_returns_modifiers(self, client: AsyncClient):
        data = await create_character(client)

        assert data["name"] == "Aria Windwhisper"
        assert data["is_public"] is False
        assert data["modifiers"]["dexterity"] == 3
        assert data["modifiers"]["strength"] == -1
        assert data["modifiers"]["constitution"] == 0

    async def test_list_and_get(self, client: AsyncClient):
        created = await create_character(client)

        listed = (await client.get("/api/characters")).json()
        fetched = (await client.get(f"/api/characters/{created['id']}")).json()

        assert [c["id"] for c in listed] == [created["id"]]
        assert fetched["skills"] == {"perception": {"total": 7}}

    async def test_partial_update_keeps_other_fields(self, client: AsyncClient):
        created = await create_character(client)

        response = await client.put(f"/api/characters/{created['id']}", json={"level": 4, "name": None})

        assert response.status_code == 200
        data = response.json()
        assert data["level"] == 4
        assert data["name"] == "Aria Windwhisper"
        assert data["character_class"] == "Ranger"

    async def test_delete(self, client: AsyncClient):
        created = await create_character(client)

        assert (await client.delete(f"/api/characters/{created['id']}")).status_code == 204
        assert (await client.get(f"/api/characters/{created['id']}")).status_code == 404

    async def test_other_users_cannot_see_or_change(self, client: AsyncClient, login_as):
        created = await create_character(client)
        await login_as("bob")

        assert (await client.get("/api/characters")).json() == []
        assert (await client.get(f"/api/characters/{created['id']}")).status_code == 404
        assert (await client.put(f"/api/characters/{created['id']}", json={"level": 9})).status_code == 404
        assert (await client.delete(f"/api/characters/{created['id']}")).status_code == 404


class TestRoll:
    async def test_ability_check(self, client: AsyncClient):
        created = await create_character(client)

        with patch("warden.core.models.domain.mechanics.random.randint", return_value=12):
            response = await client.post(f"/api/characters/{created['id']}/roll", json={"stat": "dexterity"})

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "DEXTERITY check"
        assert data["dice_roll"] == 12
        assert data["modifier"] == 3
        assert data["total"] == 15
        assert data["natural_20"] is False

    async def test_skill_check_uses_skill_total(self, client: AsyncClient):
        created = await create_character(client)

        with patch("warden.core.models.domain.mechanics.random.randint", return_value=20):
            response = await client.post(
                f"/api/characters/{created['id']}/roll", json={"roll_type": "skill", "skill_name": "perception"}
            )

        data = response.json()
        assert data["total"] == 27
        assert data["natural_20"] is True

    async def test_unreadable_skill_total_uses_ability(self, client: AsyncClient):
        created = await create_character(client, skills={"perception": {"total": "see notes"}})

        with patch("warden.core.models.domain.mechanics.random.randint", return_value=10):
            response = await client.post(
                f"/api/characters/{created['id']}/roll",
                json={"roll_type": "skill", "stat": "wisdom", "skill_name": "perception"},
            )

        assert response.status_code == 200
        assert response.json()["total"] == 12

    async def test_will_save(self, client: AsyncClient):
        created = await create_character(client)

        with patch("warden.core.models.domain.mechanics.random.randint", return_value=1):
            response = await client.post(
                f"/api/characters/{created['id']}/roll", json={"roll_type": "save", "stat": "will"}
            )

        data = response.json()
        assert data["description"] == "Will save"
        assert data["total"] == 5
        assert data["natural_1"] is True

    @pytest.mark.parametrize(
        "payload, detail",
        [
            ({}, "Stat name or skill name is required"),
            ({"stat": "luck"}, "Invalid stat name"),
            ({"stat": "luck", "roll_type": "save"}, "Invalid save name"),
        ],
    )
    async def test_invalid_roll(self, client: AsyncClient, payload, detail):
        created = await create_character(client)

        response = await client.post(f"/api/characters/{created['id']}/roll", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == detail

    async def test_unknown_roll_type(self, client: AsyncClient):
        created = await create_character(client)

        response = await client.post(
            f"/api/characters/{created['id']}/roll", json={"stat": "strength", "roll_type": "flip"}
        )

        assert response.status_code == 422


class TestPublicProfile:
    async def test_publish_assigns_unique_slugs(self, client: AsyncClient):
        first = await create_character(client)
        second = await create_character(client)

        one = (await client.patch(f"/api/characters/{first['id']}/public", json={"is_public": True})).json()
        two = (await client.patch(f"/api/characters/{second['id']}/public", json={"is_public": True})).json()

        assert one == {"is_public": True, "public_slug": "aria-windwhisper", "public_url": "/public/aria-windwhisper"}
        assert two["public_slug"] == "aria-windwhisper-1"

    async def test_republish_keeps_slug_and_unpublish_clears_it(self, client: AsyncClient):
        created = await create_character(client)
        url = f"/api/characters/{created['id']}/public"

        await client.patch(url, json={"is_public": True})
        again = (await client.patch(url, json={"is_public": True})).json()
        assert again["public_slug"] == "aria-windwhisper"

        off = (await client.patch(url, json={"is_public": False})).json()
        assert off == {"is_public": False, "public_slug": None, "public_url": None}

    async def test_public_profile_hides_secrets_and_counts_views(self, client: AsyncClient, anon_client: AsyncClient):
        created = await create_character(client)
        await client.patch(f"/api/characters/{created['id']}/public", json={"is_public": True})
        await client.post("/api/auth/logout")

        first = await anon_client.get("/api/public/characters/aria-windwhisper")
        second = await anon_client.get("/api/public/characters/aria-windwhisper")

        assert first.status_code == 200
        assert "secret" not in first.json()
        assert first.json()["public_views"] == 1
        assert second.json()["public_views"] == 2

        listed = (await anon_client.get("/api/public/characters")).json()
        assert [c["public_slug"] for c in listed] == ["aria-windwhisper"]

    async def test_unpublished_profile_is_not_found(self, client: AsyncClient, anon_client: AsyncClient):
        created = await create_character(client)
        url = f"/api/characters/{created['id']}/public"
        await client.patch(url, json={"is_public": True})
        await client.patch(url, json={"is_public": False})

        response = await anon_client.get("/api/public/characters/aria-windwhisper")

        assert response.status_code == 404
        assert response.json()["detail"] == "Character not found or not public"


class TestMemories:
    async def test_add_list_update_delete(self, client: AsyncClient):
        created = await create_character(client)
        base = f"/api/characters/{created['id']}/memories"

        added = await client.post(base, json={"memory": "Saved the miller's daughter."})
        assert added.status_code == 201
        memory = added.json()
        assert memory["guild_id"] == "web"
        assert memory["added_by"] == "alice"

        updated = await client.put(f"/api/characters/memories/{memory['id']}", json={"memory": "Owes the miller."})
        assert updated.json()["memory"] == "Owes the miller."
        assert [m["memory"] for m in (await client.get(base)).json()] == ["Owes the miller."]

        assert (await client.delete(f"/api/characters/memories/{memory['id']}")).status_code == 204
        assert (await client.get(base)).json() == []

    async def test_empty_memory_rejected(self, client: AsyncClient):
        created = await create_character(client)

        response = await client.post(f"/api/characters/{created['id']}/memories", json={"memory": ""})

        assert response.status_code == 422

    async def test_memories_of_other_users_are_hidden(self, client: AsyncClient, login_as):
        created = await create_character(client)
        memory = (await client.post(f"/api/characters/{created['id']}/memories", json={"memory": "x"})).json()
        await login_as("bob")

        assert (await client.get(f"/api/characters/{created['id']}/memories")).status_code == 404
        assert (await client.delete(f"/api/characters/memories/{memory['id']}")).status_code == 404
