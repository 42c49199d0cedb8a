import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_token_is_stable_within_a_session(client: AsyncClient):
    first = (await client.get("/api/csrf-token")).json()["csrf_token"]
    second = (await client.get("/api/csrf-token")).json()["csrf_token"]

    assert first == second
    assert len(first) >= 32


async def test_mutation_without_token_is_forbidden(client: AsyncClient):
    del client.headers["X-CSRF-Token"]

    response = await client.post("/api/characters", json={"name": "Aria"})

    assert response.status_code == 403
    assert response.json() == {"detail": "Invalid or missing CSRF token"}


async def test_mutation_with_wrong_token_is_forbidden(client: AsyncClient):
    client.headers["X-CSRF-Token"] = "forged"

    response = await client.post("/api/characters", json={"name": "Aria"})

    assert response.status_code == 403


async def test_reads_do_not_need_token(client: AsyncClient):
    del client.headers["X-CSRF-Token"]

    assert (await client.get("/api/characters")).status_code == 200


async def test_token_changes_after_login(client: AsyncClient, login_as):
    old = client.headers["X-CSRF-Token"]
    await login_as("bob")

    assert client.headers["X-CSRF-Token"] != old
