"""Pydantic schemas for API request/response validation."""

from .order import (
    OrderEventSchema,
    OrdersPaidWebhookSchema,
    OrderRecordResponseSchema,
)
from .redemption import (
    RedemptionQuoteRequestSchema,
    RedemptionQuoteResponseSchema,
    RedemptionCommitRequestSchema,
    RedemptionCommitResponseSchema,
    AllocationSchema,
)
from .ledger import (
    BalanceResponseSchema,
    LedgerResponseSchema,
    LedgerMonthSchema,
    CreditTransactionSchema,
    MonthListResponseSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "OrderEventSchema",
    "OrdersPaidWebhookSchema",
    "OrderRecordResponseSchema",
    "RedemptionQuoteRequestSchema",
    "RedemptionQuoteResponseSchema",
    "RedemptionCommitRequestSchema",
    "RedemptionCommitResponseSchema",
    "AllocationSchema",
    "BalanceResponseSchema",
    "LedgerResponseSchema",
    "LedgerMonthSchema",
    "CreditTransactionSchema",
    "MonthListResponseSchema",
    "ErrorResponseSchema",
]
