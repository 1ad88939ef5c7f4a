"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database with the ledger schema
- Test client for the FastAPI app wired to that database
- Request body helpers
"""

from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.main import app
from src.core.dependencies import get_ledger_repository
from src.infrastructure.database import Base
from src.infrastructure.repositories import PostgresLedgerRepository


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def test_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client backed by the in-memory ledger store.

    All requests share one session, so writes are visible to later
    requests in the same test without committing.
    """
    async def override_get_ledger_repository():
        return PostgresLedgerRepository(test_session)

    app.dependency_overrides[get_ledger_repository] = override_get_ledger_repository

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

def _order_body(
    order_id: str,
    total_cents: int,
    processed_at: datetime,
    customer_id: str | None = "cust_1",
    currency: str = "USD",
) -> dict:
    """Request body for POST /v1/orders."""
    return {
        "order_id": order_id,
        "customer_id": customer_id,
        "order_total_cents": total_cents,
        "currency": currency,
        "processed_at": processed_at.isoformat(),
    }


@pytest.fixture
def order_body():
    """Builder for POST /v1/orders request bodies."""
    return _order_body


@pytest.fixture
def year_of_orders() -> list[dict]:
    """$10k/month Jan-Jun 2024, $20k/month Jul-Nov, $50k in December."""
    bodies = []
    for month in range(1, 7):
        bodies.append(_order_body(f"2024-{month:02d}", 1_000_000, datetime(2024, month, 15, 12)))
    for month in range(7, 12):
        bodies.append(_order_body(f"2024-{month:02d}", 2_000_000, datetime(2024, month, 15, 12)))
    bodies.append(_order_body("2024-12", 5_000_000, datetime(2024, 12, 15, 12)))
    return bodies
