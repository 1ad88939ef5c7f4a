"""Domain Entities - Core business objects."""

from .ledger import (
    MonthKey,
    LedgerEntry,
    AppliedOrder,
    TransactionKind,
    CreditTransaction,
    OrderRecordResult,
    CustomerLedger,
)
from .redemption import (
    RedemptionReason,
    RedemptionResult,
    RedemptionAllocation,
    RedemptionCommit,
)

__all__ = [
    "MonthKey",
    "LedgerEntry",
    "AppliedOrder",
    "TransactionKind",
    "CreditTransaction",
    "OrderRecordResult",
    "CustomerLedger",
    "RedemptionReason",
    "RedemptionResult",
    "RedemptionAllocation",
    "RedemptionCommit",
]
