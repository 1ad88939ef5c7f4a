"""
Integration tests for ledger store failures.

These tests verify:
1. Database errors surface as LedgerUnavailableException, never as zero
2. Store outages are not retried like version conflicts
3. The API answers 503 LEDGER_UNAVAILABLE and tracks the error metric
"""

from datetime import datetime
from typing import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from src.main import app
from src.application.dto import OrderEvent
from src.application.services import CreditLedgerService
from src.core.dependencies import get_ledger_repository
from src.core.metrics import REGISTRY
from src.domain.entities import CustomerLedger
from src.domain.exceptions import LedgerUnavailableException
from src.infrastructure.repositories import PostgresLedgerRepository
from src.service.credit import record_order


def connection_refused() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


def unavailable_count() -> float:
    return REGISTRY.get_sample_value(
        "store_credit_ledger_errors_total", {"error_type": "unavailable"}
    ) or 0.0


@pytest.fixture
def failing_session() -> AsyncMock:
    """A session whose every query fails as if the database were down."""
    session = AsyncMock(spec=AsyncSession)
    session.execute.side_effect = connection_refused()
    return session


@pytest_asyncio.fixture
async def client_with_failing_store(
    failing_session: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_ledger_repository():
        return PostgresLedgerRepository(failing_session)

    app.dependency_overrides[get_ledger_repository] = override_get_ledger_repository

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Repository Failure Tests
# =============================================================================

class TestStoreUnavailable:

    @pytest.mark.asyncio
    async def test_get_raises_unavailable(self, failing_session):
        repo = PostgresLedgerRepository(failing_session)
        before = unavailable_count()

        with pytest.raises(LedgerUnavailableException) as exc_info:
            await repo.get("cust_1")

        assert exc_info.value.code == "LEDGER_UNAVAILABLE"
        assert unavailable_count() == before + 1

    @pytest.mark.asyncio
    async def test_list_months_raises_unavailable(self, failing_session):
        repo = PostgresLedgerRepository(failing_session)

        with pytest.raises(LedgerUnavailableException):
            await repo.list_months("cust_1")

    @pytest.mark.asyncio
    async def test_save_raises_unavailable(self, test_session: AsyncSession):
        repo = PostgresLedgerRepository(test_session)
        ledger = CustomerLedger(customer_id="cust_1")
        record_order(ledger, "1001", 1_000_000, datetime(2024, 1, 10))

        with patch.object(
            test_session, "flush", AsyncMock(side_effect=connection_refused())
        ):
            with pytest.raises(LedgerUnavailableException):
                await repo.save(ledger)

    @pytest.mark.asyncio
    async def test_load_failure_is_not_retried(self, failing_session):
        service = CreditLedgerService(
            PostgresLedgerRepository(failing_session),
            currency="USD",
            max_retries=3,
            retry_base_delay=0,
        )
        event = OrderEvent(
            order_id="1001",
            customer_id="cust_1",
            order_total_cents=1_000_000,
            currency="USD",
            processed_at=datetime(2024, 1, 10),
        )

        with pytest.raises(LedgerUnavailableException):
            await service.record_order(event)

        assert failing_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_save_failure_is_not_retried(self, test_session: AsyncSession):
        service = CreditLedgerService(
            PostgresLedgerRepository(test_session),
            currency="USD",
            max_retries=3,
            retry_base_delay=0,
        )
        event = OrderEvent(
            order_id="1001",
            customer_id="cust_1",
            order_total_cents=1_000_000,
            currency="USD",
            processed_at=datetime(2024, 1, 10),
        )
        flush = AsyncMock(side_effect=connection_refused())

        with patch.object(test_session, "flush", flush):
            with pytest.raises(LedgerUnavailableException):
                await service.record_order(event)

        assert flush.await_count == 1


# =============================================================================
# API Failure Tests
# =============================================================================

class TestStoreUnavailableApi:

    @pytest.mark.asyncio
    async def test_balance_returns_503(self, client_with_failing_store: AsyncClient):
        response = await client_with_failing_store.get("/v1/customers/cust_1/balance")

        assert response.status_code == 503
        data = response.json()
        assert data["error"] == "LEDGER_UNAVAILABLE"
        assert data["message"]
        assert "request_id" in data

    @pytest.mark.asyncio
    async def test_order_returns_503(self, client_with_failing_store: AsyncClient):
        response = await client_with_failing_store.post(
            "/v1/orders",
            json={
                "order_id": "1001",
                "customer_id": "cust_1",
                "order_total_cents": 1_000_000,
                "currency": "USD",
                "processed_at": "2024-01-10T12:00:00",
            },
        )

        assert response.status_code == 503
        assert response.json()["error"] == "LEDGER_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_quote_returns_503(self, client_with_failing_store: AsyncClient):
        response = await client_with_failing_store.post(
            "/v1/redemptions/quote",
            json={"customer_id": "cust_1", "cart_subtotal_cents": 100_000},
        )

        assert response.status_code == 503
        assert response.json()["error"] == "LEDGER_UNAVAILABLE"
