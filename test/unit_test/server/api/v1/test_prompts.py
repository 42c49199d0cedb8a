import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def add_prompt(client: AsyncClient, category: str, text: str) -> dict:
    response = await client.post("/api/prompts", json={"category": category, "prompt_text": text})
    assert response.status_code == 201, response.text
    return response.json()


class TestPrompts:
    async def test_create_records_author(self, client: AsyncClient):
        me = (await client.get("/api/auth/me")).json()

        prompt = await add_prompt(client, "world", "Describe the tavern.")

        assert prompt["created_by"] == me["id"]
        assert prompt["use_count"] == 0
        assert prompt["last_used"] is None

    async def test_unknown_category_rejected(self, client: AsyncClient):
        response = await client.post("/api/prompts", json={"category": "romance", "prompt_text": "x"})

        assert response.status_code == 422

    async def test_list_by_category_and_all(self, client: AsyncClient):
        await add_prompt(client, "world", "Describe the tavern.")
        await add_prompt(client, "combat", "Describe the ambush.")

        world = (await client.get("/api/prompts", params={"category": "world"})).json()
        everything = (await client.get("/api/prompts", params={"category": "all"})).json()

        assert [p["prompt_text"] for p in world] == ["Describe the tavern."]
        assert len(everything) == 2

    async def test_categories_summary(self, client: AsyncClient):
        await add_prompt(client, "world", "One.")
        await add_prompt(client, "world", "Two.")
        await add_prompt(client, "plot", "Three.")

        summary = (await client.get("/api/prompts/categories")).json()

        assert {s["category"]: s["count"] for s in summary} == {"plot": 1, "world": 2}
        assert all(s["total_uses"] == 0 for s in summary)

    async def test_update_and_delete(self, client: AsyncClient):
        prompt = await add_prompt(client, "world", "Old text.")

        updated = await client.put(f"/api/prompts/{prompt['id']}", json={"category": "social", "prompt_text": "New."})
        assert updated.json()["category"] == "social"

        assert (await client.delete(f"/api/prompts/{prompt['id']}")).status_code == 200
        assert (await client.put(f"/api/prompts/{prompt['id']}", json=updated.json())).status_code == 404
        assert (await client.delete(f"/api/prompts/{prompt['id']}")).status_code == 404

    async def test_popular_orders_by_use_count(self, client: AsyncClient, session_maker):
        from warden.core.database.repositories import PromptRepository

        quiet = await add_prompt(client, "world", "Quiet.")
        loud = await add_prompt(client, "world", "Loud.")
        async with session_maker() as session:
            repo = PromptRepository(session)
            await repo.record_use(await repo.get_by_id(loud["id"]))

        popular = (await client.get("/api/prompts/popular", params={"limit": 1})).json()

        assert [p["id"] for p in popular] == [loud["id"]]
        assert quiet["id"] != loud["id"]


class TestPromptSchedule:
    async def test_create_normalizes_time(self, client: AsyncClient):
        response = await client.post(
            "/api/prompts/schedule",
            json={"guild_id": "g", "channel_id": "c", "schedule_time": "9:05", "category": "plot"},
        )

        assert response.status_code == 201
        assert response.json()["schedule_time"] == "09:05:00"
        assert response.json()["category"] == "plot"

    async def test_invalid_time_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/prompts/schedule", json={"guild_id": "g", "channel_id": "c", "schedule_time": "24:00"}
        )

        assert response.status_code == 422

    async def test_list_for_guild_and_delete(self, client: AsyncClient):
        created = (
            await client.post("/api/prompts/schedule", json={"guild_id": "g", "channel_id": "c", "schedule_time": "18:00"})
        ).json()
        await client.post("/api/prompts/schedule", json={"guild_id": "other", "channel_id": "c", "schedule_time": "08:00"})

        listed = (await client.get("/api/prompts/schedule", params={"guild_id": "g"})).json()
        assert [s["id"] for s in listed] == [created["id"]]

        assert (await client.delete(f"/api/prompts/schedule/{created['id']}")).json() == {"success": True}
        assert (await client.delete(f"/api/prompts/schedule/{created['id']}")).status_code == 404


class TestTropes:
    async def test_crud_and_listing(self, client: AsyncClient):
        response = await client.post(
            "/api/tropes", json={"name": "The Mentor", "description": "Guides the hero.", "category": "archetype"}
        )
        assert response.status_code == 201
        trope = response.json()
        await client.post(
            "/api/tropes", json={"name": "Enemies to Allies", "description": "Foes unite.", "category": "dynamic"}
        )

        names = [t["name"] for t in (await client.get("/api/tropes", params={"category": "all"})).json()]
        assert names == ["Enemies to Allies", "The Mentor"]
        archetypes = (await client.get("/api/tropes", params={"category": "archetype"})).json()
        assert [t["id"] for t in archetypes] == [trope["id"]]

        updated = await client.put(
            f"/api/tropes/{trope['id']}",
            json={"name": "The Wise Mentor", "description": "Guides the hero.", "category": "archetype"},
        )
        assert updated.json()["name"] == "The Wise Mentor"

        assert (await client.delete(f"/api/tropes/{trope['id']}")).status_code == 200
        assert (await client.delete(f"/api/tropes/{trope['id']}")).status_code == 404

    async def test_categories(self, client: AsyncClient):
        await client.post("/api/tropes", json={"name": "A", "description": "a", "category": "plot"})

        summary = (await client.get("/api/tropes/categories")).json()

        assert summary == [{"category": "plot", "count": 1, "total_uses": 0}]

    async def test_unknown_category_rejected(self, client: AsyncClient):
        response = await client.post("/api/tropes", json={"name": "A", "description": "a", "category": "romance"})

        assert response.status_code == 422
