"""
Integration tests for the SQL ledger store.

These tests verify:
1. Ledgers persist and reload with entries, orders and history
2. Stale writes are rejected with a version conflict
3. Order ids are unique across customers
4. Malformed stored rows surface as corruption, never as zero
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import CustomerLedger, MonthKey
from src.domain.exceptions import (
    DuplicateOrderException,
    LedgerConflictException,
    LedgerCorruptionException,
)
from src.infrastructure.database.models import CustomerLedgerModel, LedgerEntryModel
from src.infrastructure.repositories import PostgresLedgerRepository
from src.service.credit import record_order, record_redemption


@pytest.fixture
def repo(test_session: AsyncSession) -> PostgresLedgerRepository:
    return PostgresLedgerRepository(test_session)


class TestPersistence:

    @pytest.mark.asyncio
    async def test_save_and_reload(self, repo):
        ledger = CustomerLedger(customer_id="cust_1")
        record_order(ledger, "1001", 1_000_000, datetime(2024, 1, 10))
        record_order(ledger, "1002", 2_000_000, datetime(2024, 2, 10))
        await repo.save(ledger)

        loaded = await repo.get("cust_1")

        assert loaded.version == 1
        assert loaded.months() == [MonthKey(2024, 1), MonthKey(2024, 2)]
        assert loaded.entries[MonthKey(2024, 2)].earned_cents == 70_000
        assert set(loaded.applied_orders) == {"1001", "1002"}
        assert [t.reference for t in loaded.history] == ["1001", "1002"]

    @pytest.mark.asyncio
    async def test_update_bumps_version(self, repo):
        ledger = CustomerLedger(customer_id="cust_1")
        record_order(ledger, "1001", 1_000_000, datetime(2024, 1, 10))
        await repo.save(ledger)

        loaded = await repo.get("cust_1")
        record_redemption(loaded, 5_000, datetime(2024, 2, 1), reference="r1")
        await repo.save(loaded)

        reloaded = await repo.get("cust_1")
        assert reloaded.version == 2
        assert reloaded.entries[MonthKey(2024, 1)].redeemed_cents == 5_000
        assert reloaded.redemption_references == {"r1"}
        assert len(reloaded.history) == 2

    @pytest.mark.asyncio
    async def test_missing_ledger(self, repo):
        assert await repo.get("nobody") is None
        assert await repo.list_months("nobody") == []

    @pytest.mark.asyncio
    async def test_list_months_ascending(self, repo):
        ledger = CustomerLedger(customer_id="cust_1")
        record_order(ledger, "b", 100, datetime(2024, 11, 1))
        record_order(ledger, "a", 100, datetime(2023, 12, 1))
        await repo.save(ledger)

        assert await repo.list_months("cust_1") == [MonthKey(2023, 12), MonthKey(2024, 11)]

    @pytest.mark.asyncio
    async def test_timestamps_are_timezone_aware(self, repo, test_session):
        ledger = CustomerLedger(customer_id="cust_1")
        record_order(ledger, "1001", 100, datetime(2024, 1, 10))
        await repo.save(ledger)

        model = await test_session.get(CustomerLedgerModel, "cust_1")

        assert model.created_at.tzinfo is not None
        assert model.updated_at.utcoffset() == timedelta(0)


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_stale_write_conflicts(self, repo):
        ledger = CustomerLedger(customer_id="cust_1")
        record_order(ledger, "1001", 1_000_000, datetime(2024, 1, 10))
        await repo.save(ledger)

        first = await repo.get("cust_1")
        second = await repo.get("cust_1")
        record_order(first, "1002", 500_000, datetime(2024, 1, 11))
        record_order(second, "1003", 500_000, datetime(2024, 1, 12))

        await repo.save(first)
        with pytest.raises(LedgerConflictException):
            await repo.save(second)

        stored = await repo.get("cust_1")
        assert set(stored.applied_orders) == {"1001", "1002"}

    @pytest.mark.asyncio
    async def test_concurrent_create_conflicts(self, repo):
        a = CustomerLedger(customer_id="cust_1")
        b = CustomerLedger(customer_id="cust_1")
        record_order(a, "1001", 100, datetime(2024, 1, 10))
        record_order(b, "1002", 100, datetime(2024, 1, 10))

        await repo.save(a)
        with pytest.raises(LedgerConflictException):
            await repo.save(b)

    @pytest.mark.asyncio
    async def test_order_id_unique_across_customers(self, repo):
        a = CustomerLedger(customer_id="cust_1")
        record_order(a, "1001", 100, datetime(2024, 1, 10))
        await repo.save(a)

        b = CustomerLedger(customer_id="cust_2")
        record_order(b, "1001", 100, datetime(2024, 1, 10))

        with pytest.raises(DuplicateOrderException):
            await repo.save(b)
        assert await repo.get("cust_2") is None


class TestCorruption:

    async def _insert_entry(self, session: AsyncSession, **values) -> None:
        session.add(CustomerLedgerModel(customer_id="cust_bad", version=1))
        session.add(LedgerEntryModel(customer_id="cust_bad", **values))
        await session.flush()

    @pytest.mark.asyncio
    async def test_invalid_month(self, repo, test_session):
        await self._insert_entry(test_session, year=2024, month=13, earned_cents=100)

        with pytest.raises(LedgerCorruptionException) as exc_info:
            await repo.get("cust_bad")

        assert exc_info.value.customer_id == "cust_bad"

    @pytest.mark.asyncio
    async def test_redeemed_exceeds_earned(self, repo, test_session):
        await self._insert_entry(
            test_session, year=2024, month=1, earned_cents=100, redeemed_cents=200
        )

        with pytest.raises(LedgerCorruptionException):
            await repo.get("cust_bad")

    @pytest.mark.asyncio
    async def test_negative_revenue(self, repo, test_session):
        await self._insert_entry(test_session, year=2024, month=1, revenue_cents=-5)

        with pytest.raises(LedgerCorruptionException):
            await repo.get("cust_bad")

    @pytest.mark.asyncio
    async def test_corruption_returns_500(self, client, test_session):
        await self._insert_entry(test_session, year=2024, month=0)

        response = await client.get("/v1/customers/cust_bad/balance")

        assert response.status_code == 500
        assert response.json()["error"] == "LEDGER_CORRUPTION"
