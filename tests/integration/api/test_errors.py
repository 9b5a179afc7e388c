"""Integration tests for error responses."""

import pytest
from httpx import AsyncClient

from login_service.config import Settings


pytestmark = pytest.mark.integration

GARBAGE_TOKEN = {"Authorization": "Bearer not.a.token"}


async def _confirm_with_garbage(client: AsyncClient) -> dict:
    response = await client.post(
        "/api/v1/auth/password-reset/confirm",
        json={"new_password": "long-enough-password"},
        headers=GARBAGE_TOKEN,
    )
    assert response.status_code == 401
    return response.json()


class TestProblemDetails:
    """Error bodies follow RFC 7807 and hide internals."""

    async def test_problem_detail_shape(self, client: AsyncClient):
        data = await _confirm_with_garbage(client)

        assert data["status"] == 401
        assert data["title"] == "Invalid Token"
        assert data["instance"] == "/api/v1/auth/password-reset/confirm"
        assert data["trace_id"]
        assert "cause" not in data


class TestDevelopmentDiagnostics:
    """The cause of an error is only shown in development with debug on."""

    @pytest.fixture
    def settings(self, settings: Settings) -> Settings:
        return settings.model_copy(update={"environment": "development", "debug": True})

    async def test_cause_included(self, client: AsyncClient):
        data = await _confirm_with_garbage(client)

        assert data["cause"]["type"]
        assert data["detail"] == "Invalid or expired token"
