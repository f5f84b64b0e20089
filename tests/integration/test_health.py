"""Health and version endpoint tests."""

import pytest

from photoquest.admin.seed import seed_progress


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthz(self, client):
        response = await client.get("/healthz")
        assert response.status_code == 200
        assert response.text == "ok"

    @pytest.mark.asyncio
    async def test_healthz_mints_no_device(self, client):
        response = await client.get("/healthz")
        assert "device_token" not in response.cookies

    @pytest.mark.asyncio
    async def test_ready_after_seeding(self, client, db_session):
        await seed_progress(db_session)
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "checks": {"database": "ok", "progress": "ok"}}

    @pytest.mark.asyncio
    async def test_degraded_without_progress_row(self, client):
        body = (await client.get("/ready")).json()
        assert body["status"] == "degraded"
        assert body["checks"] == {"database": "ok", "progress": "missing"}

    @pytest.mark.asyncio
    async def test_version(self, client):
        response = await client.get("/version")
        assert response.status_code == 200
        assert response.json()["version"] == "0.1.0"

