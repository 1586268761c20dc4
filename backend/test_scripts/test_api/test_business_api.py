"""
Business API Tests

Tests for POST/GET/PUT /business: one profile per user, derived figures,
partial updates and per-user isolation.
"""
import sys
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from backend.test_scripts.test_db_config import setup_test_database, make_test_engine

setup_test_database()

from backend.app.main import create_app
from backend.test_scripts.test_utils import (
    API_PREFIX,
    make_client,
    register_and_login,
    create_business,
    create_transaction,
    )

LOGO = "data:image/png;base64,iVBORw0KGgo="


@pytest_asyncio.fixture
async def app(tmp_path):
    engine = await make_test_engine(tmp_path / "business_api.db")
    yield create_app(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    """Logged-in client."""
    async with make_client(app) as client:
        await register_and_login(client, "biz")
        yield client


class TestCreateBusiness:
    @pytest.mark.asyncio
    async def test_create_returns_zero_totals(self, client):
        """BIZ-001: New business starts with every total at 0."""
        data = await create_business(client, name="Acme", description="Corner shop", industry="Retail", logo=LOGO)

        assert data["name"] == "Acme"
        assert data["logo"] == LOGO
        for key in ("total_investment", "total_expenses", "total_sales", "net_profit", "roi"):
            assert Decimal(data[key]) == 0

    @pytest.mark.asyncio
    async def test_second_business_conflicts(self, client):
        """BIZ-002: One business per user."""
        await create_business(client)
        response = await client.post(f"{API_PREFIX}/business", json={"name": "Another"})
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_payloads(self, client):
        """BIZ-003: Short name, bad logo and client-sent totals are 400."""
        for payload in ({"name": "A"}, {"name": "Acme", "logo": "logo.png"}, {"name": "Acme", "total_sales": 5}):
            response = await client.post(f"{API_PREFIX}/business", json=payload)
            assert response.status_code == 400, payload
            assert response.json()["errors"]

    @pytest.mark.asyncio
    async def test_requires_authentication(self, app):
        async with make_client(app) as anonymous:
            response = await anonymous.post(f"{API_PREFIX}/business", json={"name": "Acme"})
        assert response.status_code == 401


class TestGetBusiness:
    @pytest.mark.asyncio
    async def test_missing_business_is_404(self, client):
        """BIZ-004: Clients redirect to creation on 404."""
        response = await client.get(f"{API_PREFIX}/business")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_derived_figures(self, client):
        """BIZ-005: net_profit = sales - expenses, roi = net_profit / investment * 100."""
        business = await create_business(client)
        await create_transaction(client, business["id"], "investment", "200")
        await create_transaction(client, business["id"], "expense", "40")
        await create_transaction(client, business["id"], "sale", "90")

        data = (await client.get(f"{API_PREFIX}/business")).json()

        assert Decimal(data["total_investment"]) == Decimal("200")
        assert Decimal(data["total_expenses"]) == Decimal("40")
        assert Decimal(data["total_sales"]) == Decimal("90")
        assert Decimal(data["net_profit"]) == Decimal("50")
        assert Decimal(data["roi"]) == Decimal("25")

    @pytest.mark.asyncio
    async def test_roi_zero_without_investment(self, client):
        business = await create_business(client)
        await create_transaction(client, business["id"], "sale", "75")

        data = (await client.get(f"{API_PREFIX}/business")).json()
        assert Decimal(data["net_profit"]) == Decimal("75")
        assert Decimal(data["roi"]) == 0

    @pytest.mark.asyncio
    async def test_each_user_sees_only_own_business(self, app, client):
        """BIZ-006: Users never see each other's business."""
        mine = await create_business(client, name="Mine")
        async with make_client(app) as other:
            await register_and_login(other, "other")
            assert (await other.get(f"{API_PREFIX}/business")).status_code == 404
            theirs = await create_business(other, name="Theirs")

        assert theirs["id"] != mine["id"]
        assert (await client.get(f"{API_PREFIX}/business")).json()["name"] == "Mine"


class TestUpdateBusiness:
    @pytest.mark.asyncio
    async def test_partial_update(self, client):
        """BIZ-007: Only sent fields change; totals are untouched."""
        business = await create_business(client, name="Acme", industry="Retail")
        await create_transaction(client, business["id"], "sale", "10")

        response = await client.put(f"{API_PREFIX}/business", json={"description": "Now online", "founded_date": "2020-04-01"})

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["name"] == "Acme"
        assert data["industry"] == "Retail"
        assert data["description"] == "Now online"
        assert data["founded_date"] == "2020-04-01"
        assert Decimal(data["total_sales"]) == Decimal("10")

    @pytest.mark.asyncio
    async def test_totals_cannot_be_edited(self, client):
        await create_business(client)
        response = await client.put(f"{API_PREFIX}/business", json={"total_sales": 1000})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_without_business(self, client):
        response = await client.put(f"{API_PREFIX}/business", json={"name": "Ghost"})
        assert response.status_code == 404
