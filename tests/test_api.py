"""
API tests for the entitlement, workspace and metrics endpoints
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock

from promosync.api.dependencies import get_clock, get_store
from promosync.core.exceptions import PersistenceUnavailable
from promosync.main import app
from promosync.services.persistence import SqlPersistence

HEADERS = {"X-User-Id": "creator-1"}


@pytest_asyncio.fixture
async def store(async_db_session):
    return SqlPersistence(async_db_session)


@pytest_asyncio.fixture
async def client(store, clock):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
class TestEntitlementEndpoints:
    """Test suite for /entitlements"""

    async def test_requires_subscriber(self, client):
        response = await client.get("/api/v1/entitlements/me")

        assert response.status_code == 401

    async def test_list_tiers(self, client):
        response = await client.get("/api/v1/entitlements/tiers")

        assert response.status_code == 200
        assert [tier["id"] for tier in response.json()] == ["free", "starter", "pro"]

    async def test_me_for_new_subscriber(self, client):
        response = await client.get("/api/v1/entitlements/me", headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["tier"]["id"] == "free"
        assert body["usage"]["month"] == "2024-6"
        assert body["limits"]["contracts"] == {"allowed": True, "remaining": 3, "limit": 3, "used": 0}

    async def test_access_check(self, client):
        response = await client.get("/api/v1/entitlements/access/rateCalculator", params={"sub": "save"}, headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["allowed"] is False
        assert response.json()["message"].startswith("Save and track")

    async def test_record_usage_and_limit(self, client):
        await client.post("/api/v1/entitlements/usage/contracts", headers=HEADERS)
        await client.post("/api/v1/entitlements/usage/contracts", headers=HEADERS)

        response = await client.get("/api/v1/entitlements/limits/contracts", headers=HEADERS)

        assert response.json() == {"allowed": True, "remaining": 1, "limit": 3, "used": 2}

    async def test_change_tier(self, client):
        response = await client.put("/api/v1/entitlements/tier", json={"tier": "pro"}, headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["id"] == "pro"

        limits = await client.get("/api/v1/entitlements/limits/mediaKit", headers=HEADERS)
        assert limits.json()["remaining"] is None

    async def test_change_to_unknown_tier(self, client):
        response = await client.put("/api/v1/entitlements/tier", json={"tier": "diamond"}, headers=HEADERS)

        assert response.status_code == 400

    async def test_storage_failure_is_retryable(self, client, store):
        store.get = AsyncMock(side_effect=PersistenceUnavailable("get", "profiles"))

        response = await client.get("/api/v1/entitlements/me", headers=HEADERS)

        assert response.status_code == 503
        assert response.json()["retryable"] is True


@pytest.mark.asyncio
class TestGatedEndpoints:
    """Test suite for quota-gated workspace writes"""

    async def test_pitch_quota(self, client):
        """Test Free allows one pitch a month and upgrading keeps the count"""
        pitch = {"brand_name": "Acme", "pitch_text": "Let's work together"}

        first = await client.post("/api/v1/pitches", json=pitch, headers=HEADERS)
        assert first.status_code == 201

        second = await client.post("/api/v1/pitches", json=pitch, headers=HEADERS)
        assert second.status_code == 403
        assert second.json()["upgrade_required"] is True
        assert second.json()["limit"]["used"] == 1

        await client.put("/api/v1/entitlements/tier", json={"tier": "starter"}, headers=HEADERS)
        third = await client.post("/api/v1/pitches", json=pitch, headers=HEADERS)
        assert third.status_code == 201

        me = await client.get("/api/v1/entitlements/me", headers=HEADERS)
        assert me.json()["usage"]["counts"]["pitches"] == 2

    async def test_free_has_no_quick_apply(self, client):
        response = await client.post("/api/v1/applications", json={"brand_name": "Acme"}, headers=HEADERS)

        assert response.status_code == 403

    async def test_rates_locked_on_free(self, client):
        rate = {"followers": 5000, "calculated_rate": 120.0}

        locked = await client.post("/api/v1/rates", json=rate, headers=HEADERS)
        assert locked.status_code == 403
        assert locked.json()["feature"] == "rateCalculator"

        await client.put("/api/v1/entitlements/tier", json={"tier": "starter"}, headers=HEADERS)
        saved = await client.post("/api/v1/rates", json=rate, headers=HEADERS)
        assert saved.status_code == 201

    async def test_premium_template_locked_on_free(self, client):
        response = await client.post("/api/v1/media-kits", json={"name": "Kit", "template": "neon"}, headers=HEADERS)

        assert response.status_code == 403
        assert response.json()["sub_feature"] == "templates"

    async def test_edit_media_kit(self, client):
        """Test editing a kit keeps the quota and still gates premium templates"""
        created = await client.post("/api/v1/media-kits", json={"name": "Kit"}, headers=HEADERS)
        kit_id = created.json()["id"]

        renamed = await client.put(f"/api/v1/media-kits/{kit_id}", json={"name": "Summer Kit"}, headers=HEADERS)
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Summer Kit"

        premium = await client.put(
            f"/api/v1/media-kits/{kit_id}",
            json={"name": "Summer Kit", "template": "neon"},
            headers=HEADERS,
        )
        assert premium.status_code == 403

        stranger = await client.put(
            f"/api/v1/media-kits/{kit_id}",
            json={"name": "Mine now"},
            headers={"X-User-Id": "someone-else"},
        )
        assert stranger.status_code == 404

        limits = await client.get("/api/v1/entitlements/limits/mediaKit", headers=HEADERS)
        assert limits.json()["used"] == 1

    async def test_contract_flow_updates_metrics(self, client):
        created = await client.post(
            "/api/v1/contracts",
            json={"brand_name": "Acme", "deal_value": 1200, "status": "active"},
            headers=HEADERS,
        )
        assert created.status_code == 201
        contract_id = created.json()["id"]

        totals = await client.get("/api/v1/metrics/totals", headers=HEADERS)
        assert totals.json()["active_deals"] == 1

        completed = await client.patch(f"/api/v1/contracts/{contract_id}", json={"status": "completed"}, headers=HEADERS)
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"

        report = await client.get("/api/v1/metrics", params={"period": "30d"}, headers=HEADERS)
        body = report.json()
        assert body["degraded"] is False
        assert body["summary"]["total_revenue"] == 1200
        assert body["summary"]["active_deals"] == 0
        assert body["summary"]["revenue_series"]["data"] == [0, 0, 0, 1200]

    async def test_cannot_update_other_subscribers_contract(self, client):
        created = await client.post("/api/v1/contracts", json={"brand_name": "Acme"}, headers=HEADERS)

        response = await client.patch(
            f"/api/v1/contracts/{created.json()['id']}",
            json={"status": "active"},
            headers={"X-User-Id": "someone-else"},
        )

        assert response.status_code == 404


@pytest.mark.asyncio
class TestMetricsEndpoint:
    """Test suite for /metrics"""

    async def test_empty_metrics(self, client):
        response = await client.get("/api/v1/metrics", params={"period": "7d"}, headers=HEADERS)

        assert response.status_code == 200
        series = response.json()["summary"]["revenue_series"]
        assert series["labels"] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert series["data"] == [0] * 7

    async def test_invalid_period(self, client):
        response = await client.get("/api/v1/metrics", params={"period": "2w"}, headers=HEADERS)

        assert response.status_code == 422

    async def test_storage_failure_degrades(self, client, store):
        store.query = AsyncMock(side_effect=PersistenceUnavailable("query", "contracts"))

        response = await client.get("/api/v1/metrics", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["degraded"] is True
        assert response.json()["summary"]["revenue_series"]["labels"] == ["Week 1", "Week 2", "Week 3", "Week 4"]
