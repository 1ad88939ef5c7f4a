"""Data transfer objects for order intake."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from src.service.credit import MAX_AMOUNT_CENTS


class OrderOutcome(str, Enum):
    APPLIED = "applied"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"


@dataclass(frozen=True)
class OrderEvent:
    """A paid order delivered by the order event source (at-least-once)."""

    order_id: str
    customer_id: Optional[str]
    order_total_cents: int
    currency: str
    processed_at: datetime

    def validate(self) -> List[str]:
        errors = []

        if not self.order_id or not str(self.order_id).strip():
            errors.append("order_id is required")

        if not isinstance(self.order_total_cents, int) or isinstance(self.order_total_cents, bool):
            errors.append("order_total_cents must be an integer")
        elif self.order_total_cents < 0:
            errors.append("order_total_cents cannot be negative")
        elif self.order_total_cents > MAX_AMOUNT_CENTS:
            errors.append("order_total_cents exceeds the maximum storable amount")

        if not self.currency or not self.currency.strip():
            errors.append("currency is required")

        if not isinstance(self.processed_at, datetime):
            errors.append("processed_at must be a timestamp")

        return errors


@dataclass(frozen=True)
class OrderRecordResponse:
    """Response data for a processed order event."""

    order_id: str
    customer_id: Optional[str]
    outcome: OrderOutcome
    month: Optional[str] = None
    credit_earned_cents: int = 0
    rate_basis_points: int = 0
    month_revenue_cents: int = 0
    month_earned_cents: int = 0

    @classmethod
    def from_result(cls, result) -> "OrderRecordResponse":
        return cls(
            order_id=result.order_id,
            customer_id=result.customer_id,
            outcome=OrderOutcome.APPLIED if result.applied else OrderOutcome.DUPLICATE,
            month=str(result.month),
            credit_earned_cents=result.credit_cents,
            rate_basis_points=result.rate_bps,
            month_revenue_cents=result.month_revenue_cents,
            month_earned_cents=result.month_earned_cents,
        )
