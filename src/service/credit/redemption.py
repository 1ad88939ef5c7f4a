"""
Redemption Calculator for the Store Credit engine.

Computes how much of a customer's matured balance may be applied to a cart.
Quoting is a pure read: checkout may quote many times before an order
completes, and only a confirmed completion commits via ``record_redemption``.
"""

from datetime import datetime
from typing import Optional

from src.domain.entities import CustomerLedger, RedemptionReason, RedemptionResult
from src.domain.exceptions import InvalidRedemptionRequestException

from .ledger import redeemable_balance
from .models import BASIS_POINTS_PER_UNIT, has_customer
from .settings import CreditSettings, credit_settings


def redemption_cap_cents(
    cart_subtotal_cents: int,
    settings: CreditSettings = credit_settings,
) -> int:
    """Maximum credits payable on a subtotal, rounded down to the cent."""
    return cart_subtotal_cents * settings.redemption_cap_bps // BASIS_POINTS_PER_UNIT


def compute_redemption(
    customer_id: Optional[str],
    ledger: Optional[CustomerLedger],
    cart_subtotal_cents: int,
    now: datetime,
    requested_cents: Optional[int] = None,
    settings: CreditSettings = credit_settings,
) -> RedemptionResult:
    """
    Compute the credit discount for a cart.

    Steps:
        1. No customer -> zero ("no customer")
        2. No matured balance -> zero ("no matured credits")
        3. Zero subtotal -> zero ("zero-value order")
        4. amount = min(eligible, cap[, requested])
        5. amount below the minimum -> zero ("amount below minimum")

    Args:
        customer_id: The customer, or None for guest checkouts
        ledger: The customer's ledger snapshot (None if they have none)
        cart_subtotal_cents: Cart subtotal in cents (>= 0)
        now: The reference instant for maturation
        requested_cents: Optional amount the customer asked to apply
        settings: Credit settings (uses defaults if not provided)

    Returns:
        RedemptionResult; the ledger is never modified

    Raises:
        InvalidRedemptionRequestException: If the subtotal or requested
            amount is negative or not integer cents
    """
    if (
        not isinstance(cart_subtotal_cents, int)
        or isinstance(cart_subtotal_cents, bool)
        or cart_subtotal_cents < 0
    ):
        raise InvalidRedemptionRequestException(
            f"Cart subtotal must be non-negative integer cents, got {cart_subtotal_cents!r}"
        )
    if requested_cents is not None and (
        not isinstance(requested_cents, int)
        or isinstance(requested_cents, bool)
        or requested_cents < 0
    ):
        raise InvalidRedemptionRequestException(
            f"Requested amount must be non-negative integer cents, got {requested_cents!r}"
        )

    if not has_customer(customer_id):
        return RedemptionResult.zero(RedemptionReason.NO_CUSTOMER)

    eligible = redeemable_balance(ledger, now)
    if eligible <= 0:
        return RedemptionResult.zero(RedemptionReason.NO_MATURED_CREDITS)

    if cart_subtotal_cents == 0:
        return RedemptionResult.zero(
            RedemptionReason.ZERO_VALUE_ORDER,
            eligible_balance_cents=eligible,
        )

    cap = redemption_cap_cents(cart_subtotal_cents, settings)
    amount = min(eligible, cap)

    if requested_cents is not None:
        if requested_cents == 0:
            return RedemptionResult.zero(
                RedemptionReason.NO_CREDITS_REQUESTED,
                eligible_balance_cents=eligible,
                cap_cents=cap,
            )
        amount = min(amount, requested_cents)

    if amount < settings.min_redemption_cents:
        return RedemptionResult.zero(
            RedemptionReason.BELOW_MINIMUM,
            eligible_balance_cents=eligible,
            cap_cents=cap,
        )

    return RedemptionResult(
        amount_to_redeem_cents=amount,
        eligible_balance_cents=eligible,
        cap_cents=cap,
    )
