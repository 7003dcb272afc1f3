"""
Unit tests for the persistence adapters
"""
import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from sqlalchemy.exc import OperationalError

from promosync.core.exceptions import PersistenceUnavailable, UnknownCollection
from promosync.services.persistence import InMemoryPersistence, SqlPersistence

NOW = datetime(2024, 6, 15, 12, 0, 0)


@pytest.mark.asyncio
class TestSqlPersistence:
    """Test suite for the SQLAlchemy adapter"""

    async def test_get_missing_returns_none(self, async_db_session):
        store = SqlPersistence(async_db_session)

        assert await store.get("profiles", "nobody") is None

    async def test_put_inserts_then_updates(self, async_db_session):
        store = SqlPersistence(async_db_session)

        created = await store.put("profiles", "user-1", {"email": "creator@example.com"})
        assert created["id"] == "user-1"
        assert created["plan"] == "free"

        updated = await store.put("profiles", "user-1", {"plan": "pro", "display_name": "Creator"})
        assert updated["plan"] == "pro"
        assert updated["email"] == "creator@example.com"
        assert updated["display_name"] == "Creator"

    async def test_put_ignores_unknown_fields(self, async_db_session):
        store = SqlPersistence(async_db_session)

        record = await store.put("profiles", "user-1", {"plan": "starter", "favourite_colour": "teal"})

        assert "favourite_colour" not in record

    async def test_json_columns_round_trip(self, async_db_session):
        store = SqlPersistence(async_db_session)

        await store.put("usage", "user-1", {"month": "2024-6", "counts": {"pitches": 2}})
        await store.put("usage", "user-1", {"month": "2024-6", "counts": {"pitches": 3}})

        assert (await store.get("usage", "user-1"))["counts"] == {"pitches": 3}

    async def test_query_filters_orders_and_limits(self, async_db_session):
        store = SqlPersistence(async_db_session)
        for i in range(5):
            await store.put("contracts", f"c{i}", {
                "user_id": "user-1",
                "brand_name": f"Brand {i}",
                "status": "active" if i % 2 == 0 else "pending",
                "created_at": NOW - timedelta(days=i),
            })
        await store.put("contracts", "other", {"user_id": "user-2", "brand_name": "Other", "created_at": NOW})

        active = await store.query("contracts", {"user_id": "user-1", "status": "active"}, order_by="created_at")
        assert [row["id"] for row in active] == ["c0", "c2", "c4"]

        oldest = await store.query("contracts", {"user_id": "user-1"}, order_by="created_at", descending=False, limit=2)
        assert [row["id"] for row in oldest] == ["c4", "c3"]

    async def test_delete(self, async_db_session):
        store = SqlPersistence(async_db_session)
        await store.put("media_kits", "k1", {"user_id": "user-1", "name": "Kit"})

        assert await store.delete("media_kits", "k1") is True
        assert await store.delete("media_kits", "k1") is False
        assert await store.get("media_kits", "k1") is None

    async def test_unknown_collection(self, async_db_session):
        store = SqlPersistence(async_db_session)

        with pytest.raises(UnknownCollection):
            await store.get("invoices", "x")

    async def test_database_errors_become_persistence_unavailable(self, async_db_session):
        """Test driver errors are wrapped with the operation and collection"""
        store = SqlPersistence(async_db_session)
        async_db_session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")))

        with pytest.raises(PersistenceUnavailable) as exc_info:
            await store.query("contracts", {"user_id": "user-1"})

        assert exc_info.value.operation == "query"
        assert exc_info.value.collection == "contracts"


@pytest.mark.asyncio
class TestInMemoryPersistence:
    """Test suite for the process-local store"""

    async def test_put_merges_and_copies(self, memory_store):
        value = {"plan": "free", "tags": ["a"]}
        await memory_store.put("profiles", "u1", value)
        value["tags"].append("b")

        await memory_store.put("profiles", "u1", {"plan": "pro"})
        stored = await memory_store.get("profiles", "u1")

        assert stored == {"plan": "pro", "tags": ["a"]}

    async def test_query(self, memory_store):
        await memory_store.put("pitches", "p1", {"user_id": "u1", "created_at": NOW - timedelta(days=1)})
        await memory_store.put("pitches", "p2", {"user_id": "u1", "created_at": NOW})
        await memory_store.put("pitches", "p3", {"user_id": "u2", "created_at": NOW})

        rows = await memory_store.query("pitches", {"user_id": "u1"}, order_by="created_at")

        assert [row["created_at"] for row in rows] == [NOW, NOW - timedelta(days=1)]
        assert len(await memory_store.query("pitches", limit=1)) == 1

    async def test_delete(self, memory_store):
        await memory_store.put("pitches", "p1", {"user_id": "u1"})

        assert await memory_store.delete("pitches", "p1") is True
        assert await memory_store.delete("pitches", "p1") is False
