import pytest
from httpx import AsyncClient


class TestAnalyticsEndpoints:
    @pytest.mark.asyncio
    async def test_defaults_for_new_user(self, client: AsyncClient):
        response = await client.get("/api/v1/analytics", params={"user_id": "fresh-user"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user_analytics"]["total_extractions"] == 0
        assert len(data["daily_extractions"]) == 7
        assert [b["range"] for b in data["confidence_distribution"]] == [
            "High (80-100%)",
            "Medium (60-79%)",
            "Low (0-59%)",
        ]

    @pytest.mark.asyncio
    async def test_post_with_date_range(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/analytics",
            json={
                "user_id": "fresh-user",
                "date_range": {"start": "2025-01-01T00:00:00Z", "end": "2025-01-31T23:59:59Z"},
            },
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

    @pytest.mark.asyncio
    async def test_half_open_range_rejected(self, client: AsyncClient):
        response = await client.get("/api/v1/analytics", params={"user_id": "u", "start": "2025-01-01T00:00:00Z"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_user_id_required(self, client: AsyncClient):
        response = await client.post("/api/v1/analytics", json={})

        assert response.status_code == 400
        assert response.json()["success"] is False
