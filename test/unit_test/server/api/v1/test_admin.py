import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

PASSWORD = "Sup3r$ecret"


async def register(client: AsyncClient, username: str) -> dict:
    response = await client.post("/api/auth/register", json={"username": username, "password": PASSWORD})
    return response.json()


async def test_non_admin_is_forbidden(client: AsyncClient):
    for path in ("/api/admin/users", "/api/admin/stats"):
        response = await client.get(path)
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"


async def test_list_users_with_counts(admin_client: AsyncClient):
    await admin_client.post("/api/characters", json={"name": "Aria"})
    await admin_client.post("/api/documents/document", json={"name": "Note"})
    await register(admin_client, "bob")

    users = {u["username"]: u for u in (await admin_client.get("/api/admin/users")).json()}

    assert users["root"]["character_count"] == 1
    assert users["root"]["document_count"] == 1
    assert users["bob"]["character_count"] == 0
    assert "password" not in users["bob"]


async def test_user_detail(admin_client: AsyncClient):
    bob = await register(admin_client, "bob")

    detail = (await admin_client.get(f"/api/admin/users/{bob['id']}")).json()

    assert detail["username"] == "bob"
    assert detail["file_count"] == 0
    assert detail["storage_used_bytes"] == 0
    assert (await admin_client.get("/api/admin/users/9999")).status_code == 404


async def test_toggle_admin(admin_client: AsyncClient):
    bob = await register(admin_client, "bob")

    first = await admin_client.post(f"/api/admin/users/{bob['id']}/toggle-admin")
    second = await admin_client.post(f"/api/admin/users/{bob['id']}/toggle-admin")

    assert first.json() == {"success": True, "is_admin": True}
    assert second.json() == {"success": True, "is_admin": False}


async def test_cannot_act_on_own_account(admin_client: AsyncClient):
    me = (await admin_client.get("/api/auth/me")).json()

    toggle = await admin_client.post(f"/api/admin/users/{me['id']}/toggle-admin")
    delete = await admin_client.delete(f"/api/admin/users/{me['id']}")

    assert toggle.status_code == 400
    assert delete.status_code == 400
    assert delete.json()["detail"] == "Cannot delete your own account"


async def test_delete_user_and_site_stats(admin_client: AsyncClient):
    bob = await register(admin_client, "bob")
    await admin_client.post("/api/prompts", json={"category": "plot", "prompt_text": "A twist."})

    assert (await admin_client.delete(f"/api/admin/users/{bob['id']}")).json() == {"success": True}

    stats = (await admin_client.get("/api/admin/stats")).json()
    assert stats["total_users"] == 1
    assert stats["admin_users"] == 1
    assert stats["total_prompts"] == 1
    assert stats["total_characters"] == 0
