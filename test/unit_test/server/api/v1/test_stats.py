import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def new_character(client: AsyncClient, name: str) -> int:
    return (await client.post("/api/characters", json={"name": name})).json()["id"]


async def record(client: AsyncClient, character_id: int, guild_id: str = "g1", **counters):
    return await client.post("/api/stats/record", json={"character_id": character_id, "guild_id": guild_id, **counters})


async def test_record_accumulates_and_logs_activity(client: AsyncClient):
    aria = await new_character(client, "Aria")

    await record(client, aria, messages=3, dice_rolls=4, nat20s=1, damage=12)
    response = await record(client, aria, messages=2, dice_rolls=2, nat1s=1, description="Fought goblins")

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["total_messages"] == 5
    assert stats["total_dice_rolls"] == 6
    assert stats["nat20_count"] == 1
    assert stats["nat1_count"] == 1
    assert stats["total_damage_dealt"] == 12

    feed = (await client.get("/api/stats/activity")).json()
    assert [entry["description"] for entry in feed] == ["Fought goblins", "3 messages, 4 rolls, 12 damage"]
    assert feed[0]["character_name"] == "Aria"
    assert feed[0]["activity_type"] == "stats"


async def test_record_rejects_more_crits_than_rolls(client: AsyncClient):
    aria = await new_character(client, "Aria")

    response = await record(client, aria, dice_rolls=1, nat20s=1, nat1s=1)

    assert response.status_code == 400


async def test_record_rejects_negative_counters(client: AsyncClient):
    aria = await new_character(client, "Aria")

    assert (await record(client, aria, messages=-1)).status_code == 422


async def test_record_for_someone_elses_character(client: AsyncClient, login_as):
    aria = await new_character(client, "Aria")
    await login_as("bob")

    assert (await record(client, aria, messages=1)).status_code == 404


async def test_overview_sums_across_guilds(client: AsyncClient):
    aria = await new_character(client, "Aria")
    await new_character(client, "Brom")
    await record(client, aria, "g1", messages=2, dice_rolls=1)
    await record(client, aria, "g2", messages=3, damage=7)

    overview = (await client.get("/api/stats/overview")).json()

    assert overview == {
        "character_count": 2,
        "total_messages": 5,
        "total_dice_rolls": 1,
        "nat20_count": 0,
        "nat1_count": 0,
        "total_damage_dealt": 7,
    }


async def test_leaderboard_by_metric(client: AsyncClient):
    aria = await new_character(client, "Aria")
    brom = await new_character(client, "Brom")
    await record(client, aria, messages=1, damage=30)
    await record(client, brom, messages=9, damage=5)

    by_messages = (await client.get("/api/stats/leaderboard")).json()
    by_damage = (await client.get("/api/stats/leaderboard", params={"metric": "damage", "timeframe": "weekly"})).json()

    assert [e["character_name"] for e in by_messages["entries"]] == ["Brom", "Aria"]
    assert by_damage["metric"] == "damage"
    assert by_damage["timeframe"] == "weekly"
    assert [(e["character_name"], e["value"]) for e in by_damage["entries"]] == [("Aria", 30), ("Brom", 5)]


async def test_unknown_metric_rejected(client: AsyncClient):
    assert (await client.get("/api/stats/leaderboard", params={"metric": "gold"})).status_code == 422


async def test_compare_rates_and_damage_distribution(client: AsyncClient):
    aria = await new_character(client, "Aria")
    await record(client, aria, dice_rolls=8, nat20s=2, nat1s=1, damage=20)

    comparison = (await client.get("/api/stats/compare")).json()
    distribution = (await client.get("/api/stats/damage-distribution", params={"character_id": aria})).json()

    assert comparison[0]["crit_rate"] == 25.0
    assert comparison[0]["fail_rate"] == 12.5
    assert distribution == [
        {
            "character_id": aria,
            "character_name": "Aria",
            "total_damage": 20,
            "total_dice_rolls": 8,
            "avg_damage_per_roll": 2.5,
        }
    ]


async def test_rates_without_rolls_are_zero(client: AsyncClient):
    aria = await new_character(client, "Aria")
    await record(client, aria, messages=1)

    comparison = (await client.get("/api/stats/compare")).json()

    assert comparison[0]["crit_rate"] == 0.0
