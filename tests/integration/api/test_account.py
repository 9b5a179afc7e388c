"""Integration tests for owner-only account endpoints."""

import pytest
from httpx import AsyncClient

from login_service.modules.users.models import Account
from tests.conftest import TEST_PASSWORD


pytestmark = pytest.mark.integration

NEW_PASSWORD = "a-brand-new-password"


class TestProfile:
    """Tests for GET /api/v1/account/{account_id}."""

    async def test_owner_reads_profile(
        self, client: AsyncClient, account: Account, auth_headers: dict[str, str]
    ):
        response = await client.get(f"/api/v1/account/{account.id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(account.id)
        assert data["username"] == "alice"
        assert data["email"] == "alice@example.com"
        assert "password_hash" not in data

    async def test_other_account_forbidden(
        self,
        client: AsyncClient,
        other_account: Account,
        auth_headers: dict[str, str],
    ):
        response = await client.get(
            f"/api/v1/account/{other_account.id}", headers=auth_headers
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/errors/forbidden")

    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Basic YWxpY2U6c2VjcmV0"}, {"Authorization": "Bearer junk"}],
    )
    async def test_unauthenticated(
        self, client: AsyncClient, account: Account, headers: dict[str, str]
    ):
        """Authentication failures are 401, before any ownership check."""
        response = await client.get(f"/api/v1/account/{account.id}", headers=headers)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_deleted_owner_gets_404(
        self, client: AsyncClient, account: Account, auth_headers: dict[str, str]
    ):
        """A valid token for a deleted account finds nothing."""
        deleted = await client.delete(f"/api/v1/users/{account.id}", headers=auth_headers)
        assert deleted.status_code == 204

        response = await client.get(f"/api/v1/account/{account.id}", headers=auth_headers)

        assert response.status_code == 404


class TestChangePassword:
    """Tests for PATCH /api/v1/account/{account_id}/password."""

    async def test_change_password(
        self, client: AsyncClient, account: Account, auth_headers: dict[str, str]
    ):
        response = await client.patch(
            f"/api/v1/account/{account.id}/password",
            json={
                "current_password": TEST_PASSWORD,
                "new_password": NEW_PASSWORD,
                "new_password_confirm": NEW_PASSWORD,
            },
            headers=auth_headers,
        )

        assert response.status_code == 204
        login = await client.post(
            "/api/v1/auth/login",
            json={"username": "alice", "password": NEW_PASSWORD},
        )
        assert login.status_code == 200

    async def test_wrong_current_password(
        self, client: AsyncClient, account: Account, auth_headers: dict[str, str]
    ):
        response = await client.patch(
            f"/api/v1/account/{account.id}/password",
            json={
                "current_password": "not-the-password",
                "new_password": NEW_PASSWORD,
                "new_password_confirm": NEW_PASSWORD,
            },
            headers=auth_headers,
        )

        assert response.status_code == 401

    async def test_confirmation_mismatch(
        self, client: AsyncClient, account: Account, auth_headers: dict[str, str]
    ):
        response = await client.patch(
            f"/api/v1/account/{account.id}/password",
            json={
                "current_password": TEST_PASSWORD,
                "new_password": NEW_PASSWORD,
                "new_password_confirm": "something-else-entirely",
            },
            headers=auth_headers,
        )

        assert response.status_code == 400

    async def test_cannot_change_someone_elses_password(
        self,
        client: AsyncClient,
        other_account: Account,
        auth_headers: dict[str, str],
    ):
        response = await client.patch(
            f"/api/v1/account/{other_account.id}/password",
            json={
                "current_password": TEST_PASSWORD,
                "new_password": NEW_PASSWORD,
                "new_password_confirm": NEW_PASSWORD,
            },
            headers=auth_headers,
        )

        assert response.status_code == 403
