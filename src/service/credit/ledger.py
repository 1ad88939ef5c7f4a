"""
Credit Ledger Engine.

Pure operations over a ``CustomerLedger``: recording an order's revenue and
earned credits in its calendar month, reading the matured (redeemable)
balance as of a date, and deducting committed redemptions oldest month
first. Nothing here performs I/O or reads the clock; persistence and
per-customer serialization belong to the ledger store.

Maturation rule: credits earned in month M become redeemable from the first
instant of month M+1. Months are compared by ``MonthKey`` only, so the
day-of-month of ``as_of`` never matters.
"""

from datetime import date, datetime
from typing import List, Optional

from src.domain.entities import (
    AppliedOrder,
    CreditTransaction,
    CustomerLedger,
    LedgerEntry,
    MonthKey,
    OrderRecordResult,
    RedemptionAllocation,
    RedemptionCommit,
    TransactionKind,
)
from src.domain.exceptions import (
    InsufficientBalanceException,
    InvalidOrderAmountException,
    InvalidRedemptionRequestException,
)

from .models import MAX_AMOUNT_CENTS
from .money import format_cents
from .settings import CreditSettings, credit_settings
from .tiers import calculate_credit_cents, tier_for_revenue


def _is_cents(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def record_order(
    ledger: CustomerLedger,
    order_id: str,
    order_total_cents: int,
    processed_at: datetime,
    settings: CreditSettings = credit_settings,
) -> OrderRecordResult:
    """
    Apply a paid order to the ledger.

    The rate comes from the month's cumulative revenue *after* this order
    and is applied to this order's own total only. Earlier orders in the
    same month keep the rate they were credited at, so the same monthly
    revenue can earn different totals depending on arrival order.

    Args:
        ledger: The customer's ledger (mutated in place)
        order_id: Unique order identifier, used for deduplication
        order_total_cents: Order total in cents (>= 0)
        processed_at: When the order was paid; selects the month bucket
        settings: Credit settings (uses defaults if not provided)

    Returns:
        OrderRecordResult; ``applied`` is False for a replayed order id

    Raises:
        InvalidOrderAmountException: If the total is not a non-negative
            integer amount of cents, or would push the month's revenue
            past what the store can hold. The ledger is left untouched.
    """
    if not _is_cents(order_total_cents):
        raise InvalidOrderAmountException(
            f"Order total must be integer cents, got {order_total_cents!r}",
            amount=order_total_cents,
        )
    if order_total_cents < 0:
        raise InvalidOrderAmountException(
            f"Order total cannot be negative: {order_total_cents}",
            amount=order_total_cents,
        )
    if order_total_cents > MAX_AMOUNT_CENTS:
        raise InvalidOrderAmountException(
            f"Order total exceeds the maximum storable amount: {order_total_cents}",
            amount=order_total_cents,
        )

    if ledger.has_order(order_id):
        previous = ledger.applied_orders[order_id]
        entry = ledger.entries[previous.month]
        return OrderRecordResult(
            order_id=order_id,
            customer_id=ledger.customer_id,
            applied=False,
            month=previous.month,
            order_total_cents=previous.order_total_cents,
            credit_cents=previous.credit_cents,
            rate_bps=previous.rate_bps,
            month_revenue_cents=entry.revenue_cents,
            month_earned_cents=entry.earned_cents,
        )

    month = MonthKey.from_timestamp(processed_at)
    existing = ledger.entries.get(month)
    if existing is not None and existing.revenue_cents + order_total_cents > MAX_AMOUNT_CENTS:
        raise InvalidOrderAmountException(
            f"Month revenue for {month} would exceed the maximum storable amount",
            amount=order_total_cents,
        )
    entry = ledger.entry_for(month)

    entry.revenue_cents += order_total_cents
    tier = tier_for_revenue(entry.revenue_cents, settings)
    credit_cents = calculate_credit_cents(order_total_cents, tier.rate_bps)
    entry.earned_cents += credit_cents

    ledger.applied_orders[order_id] = AppliedOrder(
        order_id=order_id,
        month=month,
        order_total_cents=order_total_cents,
        credit_cents=credit_cents,
        rate_bps=tier.rate_bps,
        processed_at=processed_at,
    )

    if credit_cents > 0:
        ledger.history.append(
            CreditTransaction(
                kind=TransactionKind.EARNED,
                amount_cents=credit_cents,
                month=month,
                reference=order_id,
                description=(
                    f"Rebate for order #{order_id} "
                    f"({tier.percent_label} of ${format_cents(order_total_cents)})"
                ),
                created_at=processed_at,
            )
        )

    return OrderRecordResult(
        order_id=order_id,
        customer_id=ledger.customer_id,
        applied=True,
        month=month,
        order_total_cents=order_total_cents,
        credit_cents=credit_cents,
        rate_bps=tier.rate_bps,
        month_revenue_cents=entry.revenue_cents,
        month_earned_cents=entry.earned_cents,
    )


def matured_entries(ledger: CustomerLedger, as_of: date) -> List[LedgerEntry]:
    """Entries for months strictly before the month of ``as_of``, oldest first."""
    current = MonthKey.from_timestamp(as_of)
    return [ledger.entries[m] for m in ledger.months() if m < current]


def redeemable_balance(ledger: Optional[CustomerLedger], as_of: date) -> int:
    """
    Matured credit balance as of a date, in cents.

    Args:
        ledger: The customer's ledger, or None if they have none
        as_of: The reference instant ("now")

    Returns:
        Sum of earned minus redeemed over every month before as_of's month
    """
    if ledger is None:
        return 0
    return sum(entry.balance_cents for entry in matured_entries(ledger, as_of))


def pending_credits(ledger: Optional[CustomerLedger], as_of: date) -> int:
    """Credits earned in the current (or a later) month, not yet redeemable."""
    if ledger is None:
        return 0
    current = MonthKey.from_timestamp(as_of)
    return sum(e.balance_cents for m, e in ledger.entries.items() if m >= current)


def record_redemption(
    ledger: CustomerLedger,
    amount_cents: int,
    as_of: datetime,
    reference: Optional[str] = None,
) -> RedemptionCommit:
    """
    Deduct a confirmed redemption from matured months, oldest first.

    Never touches the current or a future month and never drives a month's
    balance below zero. A ``reference`` that was already committed makes
    the call a no-op.

    Args:
        ledger: The customer's ledger (mutated in place)
        amount_cents: Amount to deduct in cents (> 0)
        as_of: The reference instant ("now")
        reference: Optional idempotency reference (e.g. the order id)

    Returns:
        RedemptionCommit with the per-month allocations

    Raises:
        InvalidRedemptionRequestException: If the amount is not positive
        InsufficientBalanceException: If the amount exceeds the matured
            balance. Nothing is deducted.
    """
    if not _is_cents(amount_cents) or amount_cents <= 0:
        raise InvalidRedemptionRequestException(
            f"Redemption amount must be positive integer cents, got {amount_cents!r}"
        )

    if reference is not None and reference in ledger.redemption_references:
        return RedemptionCommit(
            customer_id=ledger.customer_id,
            amount_cents=amount_cents,
            applied=False,
            reference=reference,
        )

    entries = matured_entries(ledger, as_of)
    available = sum(entry.balance_cents for entry in entries)
    if amount_cents > available:
        raise InsufficientBalanceException(amount_cents, available)

    remaining = amount_cents
    allocations = []

    for entry in entries:
        if remaining == 0:
            break

        take = min(entry.balance_cents, remaining)
        if take <= 0:
            continue

        entry.redeemed_cents += take
        remaining -= take
        allocations.append(RedemptionAllocation(month=entry.month, amount_cents=take))

        ledger.history.append(
            CreditTransaction(
                kind=TransactionKind.REDEEMED,
                amount_cents=take,
                month=entry.month,
                reference=reference,
                description=(
                    f"Redeemed ${format_cents(take)} of {entry.month} credits"
                    + (f" on order #{reference}" if reference else "")
                ),
                created_at=as_of,
            )
        )

    return RedemptionCommit(
        customer_id=ledger.customer_id,
        amount_cents=amount_cents,
        applied=True,
        allocations=tuple(allocations),
        reference=reference,
    )
