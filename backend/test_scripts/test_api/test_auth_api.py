"""
Account API Tests

Tests for register, login, logout, /me and the session cookie.
"""
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from backend.test_scripts.test_db_config import setup_test_database, make_test_engine

setup_test_database()

from backend.app.main import create_app
from backend.app.services.auth_service import session_store
from backend.test_scripts.test_utils import (
    API_PREFIX,
    TEST_PASSWORD,
    create_business,
    make_client,
    register_and_login,
    unique_id,
    print_section,
    print_success,
    )


@pytest_asyncio.fixture
async def client(tmp_path):
    engine = await make_test_engine(tmp_path / "auth_api.db")
    async with make_client(create_app(engine)) as client:
        yield client
    await engine.dispose()


async def _register(client, username: str, email: str, password: str = TEST_PASSWORD):
    return await client.post(
        f"{API_PREFIX}/auth/register",
        json={"username": username, "email": email, "password": password},
        )


class TestRegister:
    """Tests for POST /auth/register."""

    @pytest.mark.asyncio
    async def test_register_success(self, client):
        """REG-001: Register a new account; the response carries the owner key."""
        print_section("REG-001: Register new account")
        username = unique_id("reg").lower()

        response = await _register(client, username, f"{username}@Example.COM")

        assert response.status_code == 201, response.text
        account = response.json()["account"]
        assert isinstance(account["id"], int)
        assert account["username"] == username
        assert account["email"] == f"{username}@example.com"
        assert account["is_active"] is True
        assert "hashed_password" not in account
        assert "session=" in response.headers["set-cookie"]
        print_success("Account registered successfully")

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, client):
        """REG-002: Cannot register with duplicate username."""
        username = unique_id("dup").lower()
        await _register(client, username, f"first_{username}@example.com")

        response = await _register(client, username, f"second_{username}@example.com")

        assert response.status_code == 409
        assert "username" in response.json()["detail"].lower()

    @pytest.mark.asyncio
    async def test_register_duplicate_email_case_insensitive(self, client):
        """REG-003: Email uniqueness ignores case."""
        username = unique_id("mail").lower()
        await _register(client, username, f"{username}@example.com")

        response = await _register(client, f"{username}_2", f"{username.upper()}@EXAMPLE.COM")

        assert response.status_code == 409
        assert "email" in response.json()["detail"].lower()

    @pytest.mark.asyncio
    async def test_register_invalid_payload(self, client):
        """REG-004: Short password and bad username come back as field errors."""
        response = await _register(client, "bad name!", "someone@example.com", password="123")

        assert response.status_code == 400
        fields = {err["field"] for err in response.json()["errors"]}
        assert {"username", "password"} <= fields


class TestLoginSession:
    """Tests for POST /auth/login, GET /auth/me and POST /auth/logout."""

    @pytest.mark.asyncio
    async def test_login_me_logout(self, client):
        """AUTH-001: Session cookie identifies the caller until logout."""
        account = await register_and_login(client, "me")

        response = await client.get(f"{API_PREFIX}/auth/me")
        assert response.status_code == 200
        assert response.json()["account"]["id"] == account["id"]

        response = await client.post(f"{API_PREFIX}/auth/logout")
        assert response.status_code == 200

        client.cookies.clear()
        response = await client.get(f"{API_PREFIX}/auth/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_closes_server_session(self, client):
        """AUTH-002: A cookie replayed after logout is rejected."""
        await register_and_login(client, "replay")
        session_id = client.cookies.get("session")

        await client.post(f"{API_PREFIX}/auth/logout")

        client.cookies.set("session", session_id)
        response = await client.get(f"{API_PREFIX}/auth/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_reports_business_id(self, client):
        """AUTH-003: business_id is null until the caller creates one."""
        await register_and_login(client, "owner")

        before = (await client.get(f"{API_PREFIX}/auth/me")).json()
        business = await create_business(client, "Corner Shop")
        after = (await client.get(f"{API_PREFIX}/auth/me")).json()

        assert before["business_id"] is None
        assert after["business_id"] == business["id"]

    @pytest.mark.asyncio
    async def test_login_with_email(self, client):
        """AUTH-004: The login field also accepts the email, in any case."""
        username = unique_id("bymail").lower()
        await _register(client, username, f"{username}@example.com")

        response = await client.post(
            f"{API_PREFIX}/auth/login",
            json={"login": f"{username.upper()}@Example.com", "password": TEST_PASSWORD},
            )
        assert response.status_code == 200
        assert response.json()["account"]["username"] == username

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client):
        """AUTH-005: Wrong password and unknown user give the same 401."""
        username = unique_id("wrong").lower()
        await _register(client, username, f"{username}@example.com")

        wrong = await client.post(f"{API_PREFIX}/auth/login", json={"login": username, "password": "nope-nope"})
        unknown = await client.post(f"{API_PREFIX}/auth/login", json={"login": "ghost", "password": "nope-nope"})

        assert wrong.status_code == 401
        assert unknown.status_code == 401
        assert wrong.json()["detail"] == unknown.json()["detail"]

    @pytest.mark.asyncio
    async def test_me_without_cookie(self, client):
        """AUTH-006: No session cookie means 401."""
        response = await client.get(f"{API_PREFIX}/auth/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_forged_cookie(self, client):
        """AUTH-007: Unknown session id means 401."""
        client.cookies.set("session", "not-a-real-session")
        response = await client.get(f"{API_PREFIX}/auth/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_closed_owner_sessions_rejected(self, client):
        """AUTH-008: Closing every session of an owner locks out the open cookie."""
        account = await register_and_login(client, "locked")
        assert (await client.get(f"{API_PREFIX}/business")).status_code == 404

        session_store.close_owner(account["id"])

        assert (await client.get(f"{API_PREFIX}/business")).status_code == 401
