"""
Credit Ledger & Redemption Engine for the Store Credit Gateway
"""

from .models import MAX_AMOUNT_CENTS, Tier, has_customer
from .settings import CreditSettings, credit_settings, get_credit_settings
from .money import to_cents, format_cents
from .tiers import tier_for_revenue, rebate_rate_bps, calculate_credit_cents
from .ledger import (
    record_order,
    matured_entries,
    redeemable_balance,
    pending_credits,
    record_redemption,
)
from .redemption import compute_redemption, redemption_cap_cents

__all__ = [
    # Settings
    "CreditSettings",
    "credit_settings",
    "get_credit_settings",
    # Models
    "MAX_AMOUNT_CENTS",
    "Tier",
    "has_customer",
    # Money
    "to_cents",
    "format_cents",
    # Tiers
    "tier_for_revenue",
    "rebate_rate_bps",
    "calculate_credit_cents",
    # Ledger
    "record_order",
    "matured_entries",
    "redeemable_balance",
    "pending_credits",
    "record_redemption",
    # Redemption
    "compute_redemption",
    "redemption_cap_cents",
]
