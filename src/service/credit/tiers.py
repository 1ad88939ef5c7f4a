"""
Rebate Tier Lookup for the Store Credit engine.

Maps cumulative monthly revenue to a rebate rate and turns an order's
contribution into earned credits.
"""

from .models import BASIS_POINTS_PER_UNIT, Tier
from .settings import CreditSettings, credit_settings


NO_REBATE_TIER = Tier(threshold_cents=0, rate_bps=0)


def tier_for_revenue(
    revenue_cents: int,
    settings: CreditSettings = credit_settings,
) -> Tier:
    """
    Find the tier that applies to a cumulative monthly revenue.

    Thresholds are scanned highest first, so the highest threshold
    at or below the revenue wins.

    Args:
        revenue_cents: Cumulative revenue for the month in cents
        settings: Credit settings (uses defaults if not provided)

    Returns:
        The matching tier, or a zero-rate tier below the lowest threshold
    """
    for tier in settings.tiers:
        if revenue_cents >= tier.threshold_cents:
            return tier

    return NO_REBATE_TIER


def rebate_rate_bps(
    revenue_cents: int,
    settings: CreditSettings = credit_settings,
) -> int:
    """Rebate rate in basis points for a cumulative monthly revenue."""
    return tier_for_revenue(revenue_cents, settings).rate_bps


def calculate_credit_cents(order_total_cents: int, rate_bps: int) -> int:
    """
    Credits earned by one order at a given rate, rounded half-up to the cent.

    Args:
        order_total_cents: The order's own contribution in cents (>= 0)
        rate_bps: Rebate rate in basis points

    Returns:
        Credit in cents
    """
    return (order_total_cents * rate_bps + BASIS_POINTS_PER_UNIT // 2) // BASIS_POINTS_PER_UNIT
