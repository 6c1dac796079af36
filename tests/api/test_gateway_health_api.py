"""
Gateway Health API Tests

Usage:
    pytest tests/api/test_gateway_health_api.py -v
"""
import httpx
import pytest

from gateway.main import app

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


class TestHealth:

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "service": "homestay_gateway",
            "version": "1.0.0",
        }

    async def test_liveness(self, client):
        response = await client.get("/health/live")

        assert response.json() == {"status": "alive"}

    async def test_ready_when_backend_answers(self, client, backend):
        backend.set_response("GET", "/health", 200, {"status": "ok"})

        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "backend": "reachable"}

    async def test_not_ready_when_backend_down(self, client, backend):
        backend.set_error(httpx.ConnectError("down"))

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "not_ready", "backend": "unreachable"}

    async def test_not_ready_without_factory(self):
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
            response = await c.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["backend"] == "uninitialized"

    async def test_root_lists_routes(self, client):
        response = await client.get("/")

        body = response.json()
        assert body["service_name"] == "homestay_gateway"
        assert int(body["routes"]["route_count"]) > 0
        assert "auth" in body["routes"]["groups"].split(",")
