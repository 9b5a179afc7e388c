"""Integration tests for the users endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from login_service.modules.users.models import Account
from tests.factories.account import AccountFactory


pytestmark = pytest.mark.integration


@pytest.fixture
async def listing(db: AsyncSession, account: Account) -> None:
    """24 more accounts so that, with alice, there are 25."""
    db.add_all(
        AccountFactory.build(username=f"user-{n:02d}", email=None) for n in range(1, 25)
    )
    await db.flush()


class TestListUsers:
    """Tests for GET /api/v1/users."""

    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get("/api/v1/users")

        assert response.status_code == 401

    async def test_second_page(
        self, client: AsyncClient, listing: None, auth_headers: dict[str, str]
    ):
        """Any authenticated caller can page through all accounts."""
        response = await client.get(
            "/api/v1/users", params={"page": 2, "limit": 10}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert [item["username"] for item in data["items"]] == [
            f"user-{n:02d}" for n in range(10, 20)
        ]
        assert data["total"] == 25
        assert data["total_pages"] == 3
        assert data["next"] == {"page": 3, "limit": 10}
        assert data["previous"] == {"page": 1, "limit": 10}
        assert all("password_hash" not in item for item in data["items"])

    async def test_filter(
        self, client: AsyncClient, listing: None, auth_headers: dict[str, str]
    ):
        response = await client.get(
            "/api/v1/users", params={"filter": "ALI"}, headers=auth_headers
        )

        data = response.json()
        assert [item["username"] for item in data["items"]] == ["alice"]
        assert data["next"] is None
        assert data["previous"] is None

    @pytest.mark.parametrize(
        "params", [{"page": 0}, {"page": "abc"}, {"limit": 0}, {"limit": 101}]
    )
    async def test_invalid_paging(
        self, client: AsyncClient, auth_headers: dict[str, str], params: dict
    ):
        response = await client.get("/api/v1/users", params=params, headers=auth_headers)

        assert response.status_code == 400


class TestUserById:
    """Tests for /api/v1/users/{account_id}."""

    async def test_get_own_account(
        self, client: AsyncClient, account: Account, auth_headers: dict[str, str]
    ):
        response = await client.get(f"/api/v1/users/{account.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    async def test_get_other_account_forbidden(
        self,
        client: AsyncClient,
        other_account: Account,
        auth_headers: dict[str, str],
    ):
        response = await client.get(
            f"/api/v1/users/{other_account.id}", headers=auth_headers
        )

        assert response.status_code == 403

    async def test_delete_other_account_forbidden(
        self,
        client: AsyncClient,
        other_account: Account,
        auth_headers: dict[str, str],
    ):
        response = await client.delete(
            f"/api/v1/users/{other_account.id}", headers=auth_headers
        )

        assert response.status_code == 403

    async def test_delete_own_account(
        self, client: AsyncClient, account: Account, auth_headers: dict[str, str]
    ):
        """Deleting an account also ends its ability to log in."""
        response = await client.delete(f"/api/v1/users/{account.id}", headers=auth_headers)

        assert response.status_code == 204
        login = await client.post(
            "/api/v1/auth/login",
            json={"username": "alice", "password": "correct-horse-battery"},
        )
        assert login.status_code == 401
