"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    Base,
    CustomerLedgerModel,
    LedgerEntryModel,
    AppliedOrderModel,
    CreditTransactionModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "CustomerLedgerModel",
    "LedgerEntryModel",
    "AppliedOrderModel",
    "CreditTransactionModel",
]
