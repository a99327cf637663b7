import pytest
from httpx import AsyncClient

from textextract.config import settings


class TestHealthEndpoints:
    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_api_health(self, client: AsyncClient):
        response = await client.get("/api/v1/health")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/api/v1/health/ready")
        assert response.status_code == 200
        data = response.json()
        assert data["checks"]["database"] == "connected"
        assert "tesseract" in data["checks"]

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestApiToken:
    @pytest.mark.asyncio
    async def test_token_required_when_configured(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "api_token", "service-secret")

        response = await client.get("/api/v1/settings/user-1")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Missing bearer token"}

    @pytest.mark.asyncio
    async def test_wrong_token(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "api_token", "service-secret")

        response = await client.get("/api/v1/settings/user-1", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_valid_token(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "api_token", "service-secret")

        response = await client.get("/api/v1/settings/user-1", headers={"Authorization": "Bearer service-secret"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_stays_open(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "api_token", "service-secret")

        response = await client.get("/api/v1/health")

        assert response.status_code == 200
