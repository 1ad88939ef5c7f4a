"""Redemption quote and commit entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .ledger import MonthKey


class RedemptionReason(str, Enum):
    """Why a quote came out as zero."""

    NO_CUSTOMER = "no customer"
    NO_MATURED_CREDITS = "no matured credits"
    ZERO_VALUE_ORDER = "zero-value order"
    NO_CREDITS_REQUESTED = "no credits requested"
    BELOW_MINIMUM = "amount below minimum"


@dataclass(frozen=True)
class RedemptionResult:
    """
    Result of a redemption quote.

    Attributes:
        amount_to_redeem_cents: Discount to apply (0 <= amount <= subtotal)
        eligible_balance_cents: Sum of matured credits at computation time
        cap_cents: Maximum redeemable for this subtotal
        reason: Set only when the amount is zero
    """

    amount_to_redeem_cents: int
    eligible_balance_cents: int
    cap_cents: int = 0
    reason: Optional[RedemptionReason] = None

    @property
    def redeemable(self) -> bool:
        return self.amount_to_redeem_cents > 0

    @classmethod
    def zero(
        cls,
        reason: RedemptionReason,
        eligible_balance_cents: int = 0,
        cap_cents: int = 0,
    ) -> "RedemptionResult":
        return cls(
            amount_to_redeem_cents=0,
            eligible_balance_cents=eligible_balance_cents,
            cap_cents=cap_cents,
            reason=reason,
        )

    def to_dict(self) -> dict:
        return {
            "amount_to_redeem_cents": self.amount_to_redeem_cents,
            "eligible_balance_cents": self.eligible_balance_cents,
            "cap_cents": self.cap_cents,
            "reason": self.reason.value if self.reason else None,
        }


@dataclass(frozen=True)
class RedemptionAllocation:
    """Portion of a redemption deducted from one matured month."""

    month: MonthKey
    amount_cents: int


@dataclass(frozen=True)
class RedemptionCommit:
    """Outcome of committing a redemption against a ledger."""

    customer_id: str
    amount_cents: int
    applied: bool
    allocations: Tuple[RedemptionAllocation, ...] = ()
    reference: Optional[str] = None
