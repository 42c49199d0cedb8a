import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def add_lore(client: AsyncClient, tag: str, content: str, guild_id: str = "guild-1") -> dict:
    response = await client.post("/api/lore", json={"guild_id": guild_id, "tag": tag, "content": content})
    assert response.status_code == 201, response.text
    return response.json()


async def test_add_and_list_guild_lore(client: AsyncClient):
    first = await add_lore(client, "history", "The Great War began in 1342.")
    second = await add_lore(client, "factions", "The Crimson Guild controls trade.")
    await add_lore(client, "history", "Elsewhere.", guild_id="guild-2")

    listed = (await client.get("/api/lore/guild/guild-1")).json()

    assert [entry["id"] for entry in listed] == [second["id"], first["id"]]
    assert first["user_id"] is not None


async def test_filter_by_tag(client: AsyncClient):
    await add_lore(client, "history", "One.")
    await add_lore(client, "factions", "Two.")

    listed = (await client.get("/api/lore/guild/guild-1", params={"tag": "history"})).json()

    assert [entry["content"] for entry in listed] == ["One."]


async def test_channel_tag_set_and_replace(client: AsyncClient):
    url = "/api/lore/channel/guild-1/chan-1/tag"
    assert (await client.get(url)).json() is None

    await client.post("/api/lore/channel/tag", json={"guild_id": "guild-1", "channel_id": "chan-1", "tag": "history"})
    response = await client.post(
        "/api/lore/channel/tag", json={"guild_id": "guild-1", "channel_id": "chan-1", "tag": "npcs"}
    )

    assert response.status_code == 200
    assert (await client.get(url)).json() == {"guild_id": "guild-1", "channel_id": "chan-1", "tag": "npcs"}


async def test_delete_entry(client: AsyncClient):
    entry = await add_lore(client, "history", "Gone soon.")

    assert (await client.delete(f"/api/lore/{entry['id']}")).json() == {"success": True}
    response = await client.delete(f"/api/lore/{entry['id']}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Lore entry not found"


async def test_empty_content_rejected(client: AsyncClient):
    response = await client.post("/api/lore", json={"guild_id": "guild-1", "tag": "history", "content": ""})

    assert response.status_code == 422
