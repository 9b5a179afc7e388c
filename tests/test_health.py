"""Tests for health check endpoints."""

from httpx import AsyncClient


async def test_liveness_endpoint(client: AsyncClient):
    """Test that liveness endpoint returns 200."""
    response = await client.get("/health/live")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "alive"


async def test_info_endpoint(client: AsyncClient):
    """Test that info endpoint returns application metadata."""
    response = await client.get("/info")

    assert response.status_code == 200
    data = response.json()
    assert data["app"] == "Login Service"
    assert data["environment"] == "test"


async def test_request_id_and_security_headers(client: AsyncClient):
    """Every response carries a request ID and security headers."""
    response = await client.get("/health/live", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Strict-Transport-Security" not in response.headers
