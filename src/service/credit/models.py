"""
Data models for credit accrual.

The ledger data model itself lives in ``src.domain.entities``; this module
holds the static configuration types used by the engine.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


BASIS_POINTS_PER_UNIT = 10_000

# Largest amount a BigInteger ledger column holds
MAX_AMOUNT_CENTS = 2**63 - 1


def has_customer(customer_id: Optional[object]) -> bool:
    """A missing, blank or zero customer id means a guest checkout."""
    if customer_id is None:
        return False
    value = str(customer_id).strip()
    return bool(value) and value != "0"


@dataclass(frozen=True)
class Tier:
    """
    A rebate tier.

    Attributes:
        threshold_cents: Minimum cumulative monthly revenue for this tier
        rate_bps: Rebate rate in basis points (200 = 2%)
    """

    threshold_cents: int
    rate_bps: int

    @property
    def percent_label(self) -> str:
        """Rate formatted for history descriptions (e.g. '3.50%')."""
        return f"{Decimal(self.rate_bps) / 100:.2f}%"
