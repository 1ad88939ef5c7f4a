"""Data Transfer Objects for application layer."""

from .order import OrderEvent, OrderOutcome, OrderRecordResponse
from .redemption import (
    RedemptionQuoteRequest,
    RedemptionQuoteResponse,
    RedemptionCommitRequest,
    RedemptionCommitResponse,
)
from .ledger import BalanceResponse, LedgerResponse, MonthListResponse

__all__ = [
    "OrderEvent",
    "OrderOutcome",
    "OrderRecordResponse",
    "RedemptionQuoteRequest",
    "RedemptionQuoteResponse",
    "RedemptionCommitRequest",
    "RedemptionCommitResponse",
    "BalanceResponse",
    "LedgerResponse",
    "MonthListResponse",
]
