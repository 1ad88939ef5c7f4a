"""Data transfer objects for checkout redemption."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class RedemptionQuoteRequest:
    """Input data for quoting a credit discount at checkout."""

    customer_id: Optional[str]
    cart_subtotal_cents: int
    currency: str
    as_of: datetime
    requested_cents: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []

        if self.cart_subtotal_cents < 0:
            errors.append("cart_subtotal_cents cannot be negative")

        if self.requested_cents is not None and self.requested_cents < 0:
            errors.append("requested_cents cannot be negative")

        if not self.currency or not self.currency.strip():
            errors.append("currency is required")

        return errors


@dataclass(frozen=True)
class RedemptionQuoteResponse:
    """Response data for a redemption quote."""

    customer_id: Optional[str]
    amount_to_redeem_cents: int
    eligible_balance_cents: int
    cap_cents: int
    reason: Optional[str]

    @classmethod
    def from_result(cls, customer_id: Optional[str], result) -> "RedemptionQuoteResponse":
        return cls(
            customer_id=customer_id,
            amount_to_redeem_cents=result.amount_to_redeem_cents,
            eligible_balance_cents=result.eligible_balance_cents,
            cap_cents=result.cap_cents,
            reason=result.reason.value if result.reason else None,
        )


@dataclass(frozen=True)
class RedemptionCommitRequest:
    """Input data for committing a redemption after order completion."""

    customer_id: str
    amount_cents: int
    as_of: datetime
    reference: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.customer_id or not self.customer_id.strip():
            errors.append("customer_id is required")

        if self.amount_cents <= 0:
            errors.append("amount_cents must be positive")

        return errors


@dataclass(frozen=True)
class AllocationDTO:
    """Credits taken from one month."""

    month: str
    amount_cents: int


@dataclass(frozen=True)
class RedemptionCommitResponse:
    """Response data for a committed redemption."""

    customer_id: str
    amount_cents: int
    applied: bool
    reference: Optional[str]
    allocations: List[AllocationDTO]
    remaining_balance_cents: int

    @classmethod
    def from_commit(cls, commit, remaining_balance_cents: int) -> "RedemptionCommitResponse":
        return cls(
            customer_id=commit.customer_id,
            amount_cents=commit.amount_cents,
            applied=commit.applied,
            reference=commit.reference,
            allocations=[
                AllocationDTO(month=str(a.month), amount_cents=a.amount_cents)
                for a in commit.allocations
            ],
            remaining_balance_cents=remaining_balance_cents,
        )
