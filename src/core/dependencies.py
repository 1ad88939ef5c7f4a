"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import PostgresLedgerRepository
from src.application.services import CreditLedgerService, RedemptionService
from src.service.credit import CreditSettings, get_credit_settings


# Repository dependencies
async def get_ledger_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresLedgerRepository:
    """Get a LedgerRepository instance."""
    return PostgresLedgerRepository(session)


# Service dependencies
async def get_ledger_service(
    ledger_repo: Annotated[PostgresLedgerRepository, Depends(get_ledger_repository)],
    credit_config: Annotated[CreditSettings, Depends(get_credit_settings)],
) -> CreditLedgerService:
    """Get a CreditLedgerService instance."""
    return CreditLedgerService(ledger_repository=ledger_repo, settings=credit_config)


async def get_redemption_service(
    ledger_repo: Annotated[PostgresLedgerRepository, Depends(get_ledger_repository)],
    credit_config: Annotated[CreditSettings, Depends(get_credit_settings)],
) -> RedemptionService:
    """Get a RedemptionService instance."""
    return RedemptionService(ledger_repository=ledger_repo, settings=credit_config)
