from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient

from warden.server.main import app

pytestmark = pytest.mark.asyncio


async def test_health_without_bot(anon_client: AsyncClient):
    response = await anon_client.get("/api/system/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"
    assert data["bot"] == "disabled"


@pytest.mark.parametrize("ready, state", [(True, "connected"), (False, "connecting")])
async def test_health_reports_bot_state(anon_client: AsyncClient, monkeypatch, ready, state):
    bot = MagicMock()
    bot.is_ready.return_value = ready
    monkeypatch.setattr(app.state, "bot", bot)

    response = await anon_client.get("/api/system/health")

    assert response.json()["bot"] == state


async def test_rotation_never_recorded_is_overdue(client: AsyncClient):
    status = (await client.get("/api/system/password-rotation-status")).json()

    assert status == {"last_rotated": None, "days_until_rotation": 0, "needs_rotation": True, "overdue": True}


async def test_recording_rotation_requires_admin(client: AsyncClient):
    response = await client.post("/api/system/record-password-rotation")

    assert response.status_code == 403


async def test_record_rotation(admin_client: AsyncClient):
    response = await admin_client.post("/api/system/record-password-rotation")

    assert response.status_code == 200
    assert response.json()["message"].endswith("Next rotation due in 90 days.")

    status = (await admin_client.get("/api/system/password-rotation-status")).json()
    assert status["needs_rotation"] is False
    assert status["overdue"] is False
    assert status["days_until_rotation"] == 90
