"""Data transfer objects for ledger views."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class BalanceResponse:
    """A customer's balances as of an instant."""

    customer_id: str
    as_of: str
    redeemable_balance_cents: int
    pending_credits_cents: int
    lifetime_revenue_cents: int
    lifetime_earned_cents: int
    lifetime_redeemed_cents: int


@dataclass(frozen=True)
class LedgerMonthDTO:
    month: str
    revenue_cents: int
    earned_cents: int
    redeemed_cents: int
    balance_cents: int


@dataclass(frozen=True)
class CreditTransactionDTO:
    id: str
    kind: str
    amount_cents: int
    month: str
    reference: Optional[str]
    description: str
    created_at: str


@dataclass(frozen=True)
class LedgerResponse:
    """Full per-month ledger and credit history for a customer."""

    customer_id: str
    version: int
    months: List[LedgerMonthDTO]
    history: List[CreditTransactionDTO]

    @classmethod
    def from_entity(cls, ledger) -> "LedgerResponse":
        months = [
            LedgerMonthDTO(**ledger.entries[month].to_dict())
            for month in ledger.months()
        ]
        history = [CreditTransactionDTO(**txn.to_dict()) for txn in ledger.history]
        return cls(
            customer_id=ledger.customer_id,
            version=ledger.version,
            months=months,
            history=history,
        )


@dataclass(frozen=True)
class MonthListResponse:
    customer_id: str
    months: List[str]
