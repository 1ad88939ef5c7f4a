"""Application services (use cases)."""

from .ledger_service import CreditLedgerService
from .redemption_service import RedemptionService

__all__ = [
    "CreditLedgerService",
    "RedemptionService",
]
