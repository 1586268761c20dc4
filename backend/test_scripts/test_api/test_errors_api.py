"""
Error Handling API Tests

Uniform error bodies: store outages map to 503, unexpected failures to 500,
and internal detail is only exposed in development.
"""
import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from backend.test_scripts.test_db_config import setup_test_database, make_test_engine

setup_test_database()

from backend.app.db.session import get_session_generator
from backend.app.main import create_app
from backend.test_scripts.test_utils import API_PREFIX, make_client


@pytest_asyncio.fixture
async def app(tmp_path):
    engine = await make_test_engine(tmp_path / "errors_api.db")
    yield create_app(engine)
    await engine.dispose()


async def _store_down():
    raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))
    yield  # pragma: no cover


class TestStoreUnavailable:
    @pytest.mark.asyncio
    async def test_store_outage_is_503(self, app, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        app.dependency_overrides[get_session_generator] = _store_down

        async with make_client(app) as client:
            response = await client.get(f"{API_PREFIX}/business")

        assert response.status_code == 503
        body = response.json()
        assert body["detail"] == "Service temporarily unavailable"
        assert "error" not in body

    @pytest.mark.asyncio
    async def test_development_exposes_error_detail(self, app, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        app.dependency_overrides[get_session_generator] = _store_down

        async with make_client(app) as client:
            response = await client.get(f"{API_PREFIX}/business")

        assert response.status_code == 503
        assert "unable to open database file" in response.json()["error"]


class TestUnhandled:
    @pytest.mark.asyncio
    async def test_unexpected_error_is_500(self, app, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        async def _boom():
            raise RuntimeError("boom")
            yield  # pragma: no cover

        app.dependency_overrides[get_session_generator] = _boom

        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.get(f"{API_PREFIX}/business")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}


class TestMeta:
    @pytest.mark.asyncio
    async def test_root_and_health(self, app):
        async with make_client(app) as client:
            root = await client.get("/")
            health = await client.get(f"{API_PREFIX}/health")

        assert root.status_code == 200
        assert root.json()["name"] == "BizLedger"
        assert health.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_error_bodies_documented(self, app):
        """Non-2xx responses are declared with the ErrorResponse model."""
        async with make_client(app) as client:
            schema = (await client.get(f"{API_PREFIX}/openapi.json")).json()

        assert {"ErrorResponse", "FieldError"} <= set(schema["components"]["schemas"])
        create_tx = schema["paths"][f"{API_PREFIX}/transactions"]["post"]["responses"]
        assert create_tx["404"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
        create_business = schema["paths"][f"{API_PREFIX}/business"]["post"]["responses"]
        assert create_business["409"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")


class TestValidationBody:
    @pytest.mark.asyncio
    async def test_field_errors_shape(self, app):
        async with make_client(app) as client:
            response = await client.post(
                f"{API_PREFIX}/auth/register", json={"username": "ab", "email": "nope", "password": "x"},
                )

        assert response.status_code == 400
        body = response.json()
        assert set(body) == {"detail", "errors"}
        assert {err["field"] for err in body["errors"]} == {"username", "email", "password"}
        assert all(set(err) == {"field", "message"} for err in body["errors"])
