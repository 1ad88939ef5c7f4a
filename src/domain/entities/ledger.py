"""Credit ledger entities: months, per-month entries and the customer ledger."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Set
from uuid import UUID, uuid4

from src.domain.exceptions import LedgerCorruptionException


@dataclass(frozen=True, order=True)
class MonthKey:
    """
    Calendar month identifier used to bucket revenue and credits.

    Ordering is lexicographic on (year, month).
    """

    year: int
    month: int

    def __post_init__(self):
        if not isinstance(self.year, int) or not isinstance(self.month, int):
            raise ValueError("year and month must be integers")
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")

    @classmethod
    def from_timestamp(cls, timestamp: date) -> "MonthKey":
        """Month of the timestamp's own calendar fields (no tz conversion)."""
        return cls(timestamp.year, timestamp.month)

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        """Parse a ``YYYY-MM`` string."""
        try:
            year_str, month_str = value.split("-")
            return cls(int(year_str), int(month_str))
        except (AttributeError, ValueError) as e:
            raise ValueError(f"Invalid month key: {value!r}") from e

    def next(self) -> "MonthKey":
        if self.month == 12:
            return MonthKey(self.year + 1, 1)
        return MonthKey(self.year, self.month + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass
class LedgerEntry:
    """Revenue, earned and redeemed credits for one customer-month, in cents."""

    month: MonthKey
    revenue_cents: int = 0
    earned_cents: int = 0
    redeemed_cents: int = 0

    @property
    def balance_cents(self) -> int:
        return self.earned_cents - self.redeemed_cents

    def to_dict(self) -> dict:
        return {
            "month": str(self.month),
            "revenue_cents": self.revenue_cents,
            "earned_cents": self.earned_cents,
            "redeemed_cents": self.redeemed_cents,
            "balance_cents": self.balance_cents,
        }


@dataclass(frozen=True)
class AppliedOrder:
    """An order whose contribution is already in the ledger."""

    order_id: str
    month: MonthKey
    order_total_cents: int
    credit_cents: int
    rate_bps: int
    processed_at: datetime


class TransactionKind(str, Enum):
    EARNED = "earned"
    REDEEMED = "redeemed"


@dataclass(frozen=True)
class CreditTransaction:
    """A single line of the customer's credit history."""

    kind: TransactionKind
    amount_cents: int
    month: MonthKey
    description: str
    created_at: datetime
    reference: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "kind": self.kind.value,
            "amount_cents": self.amount_cents,
            "month": str(self.month),
            "reference": self.reference,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class OrderRecordResult:
    """Outcome of applying one order to a ledger."""

    order_id: str
    customer_id: str
    applied: bool
    month: MonthKey
    order_total_cents: int
    credit_cents: int
    rate_bps: int
    month_revenue_cents: int
    month_earned_cents: int


@dataclass
class CustomerLedger:
    """
    All monthly entries for exactly one customer.

    Created lazily on the first order and never deleted. ``version`` is the
    optimistic concurrency token owned by the ledger store (0 = not yet
    persisted).
    """

    customer_id: str
    entries: Dict[MonthKey, LedgerEntry] = field(default_factory=dict)
    applied_orders: Dict[str, AppliedOrder] = field(default_factory=dict)
    history: List[CreditTransaction] = field(default_factory=list)
    version: int = 0

    def entry_for(self, month: MonthKey) -> LedgerEntry:
        """Get the entry for a month, creating an empty one if needed."""
        entry = self.entries.get(month)
        if entry is None:
            entry = LedgerEntry(month=month)
            self.entries[month] = entry
        return entry

    def months(self) -> List[MonthKey]:
        return sorted(self.entries)

    def has_order(self, order_id: str) -> bool:
        return order_id in self.applied_orders

    @property
    def redemption_references(self) -> Set[str]:
        return {
            txn.reference
            for txn in self.history
            if txn.kind == TransactionKind.REDEEMED and txn.reference
        }

    @property
    def lifetime_revenue_cents(self) -> int:
        return sum(e.revenue_cents for e in self.entries.values())

    @property
    def lifetime_earned_cents(self) -> int:
        return sum(e.earned_cents for e in self.entries.values())

    @property
    def lifetime_redeemed_cents(self) -> int:
        return sum(e.redeemed_cents for e in self.entries.values())

    def check_integrity(self) -> None:
        """
        Validate ledger state loaded from a store.

        Raises:
            LedgerCorruptionException: If any entry is malformed
        """
        for month, entry in self.entries.items():
            if entry.month != month:
                raise LedgerCorruptionException(
                    f"Entry keyed {month} holds month {entry.month}",
                    customer_id=self.customer_id,
                )
            amounts = (entry.revenue_cents, entry.earned_cents, entry.redeemed_cents)
            if any(not isinstance(a, int) or isinstance(a, bool) for a in amounts):
                raise LedgerCorruptionException(
                    f"Non-integer amount in entry {month}",
                    customer_id=self.customer_id,
                )
            if any(a < 0 for a in amounts):
                raise LedgerCorruptionException(
                    f"Negative amount in entry {month}",
                    customer_id=self.customer_id,
                )
            if entry.redeemed_cents > entry.earned_cents:
                raise LedgerCorruptionException(
                    f"Redeemed exceeds earned in entry {month}",
                    customer_id=self.customer_id,
                )

        for order_id, order in self.applied_orders.items():
            if order.month not in self.entries:
                raise LedgerCorruptionException(
                    f"Applied order {order_id} references missing month {order.month}",
                    customer_id=self.customer_id,
                )
