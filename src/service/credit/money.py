"""Money conversion helpers. All ledger amounts are integer cents."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from src.domain.exceptions import InvalidOrderAmountException

from .models import MAX_AMOUNT_CENTS

Amount = Union[int, float, str, Decimal]

CENT = Decimal("0.01")


def to_cents(value: Amount) -> int:
    """
    Convert a major-unit amount (e.g. "199.65") to integer cents.

    Ints are taken as major units too, so ``to_cents(10)`` is 1000.

    Raises:
        InvalidOrderAmountException: If the value is malformed, non-finite
            negative or too large to store
    """
    if isinstance(value, bool) or value is None:
        raise InvalidOrderAmountException(f"Invalid amount: {value!r}", amount=value)

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidOrderAmountException(f"Invalid amount: {value!r}", amount=value)

    if not amount.is_finite():
        raise InvalidOrderAmountException(f"Amount must be finite: {value!r}", amount=value)
    if amount < 0:
        raise InvalidOrderAmountException(f"Amount cannot be negative: {value!r}", amount=value)

    cents = int((amount / CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if cents > MAX_AMOUNT_CENTS:
        raise InvalidOrderAmountException(f"Amount too large: {value!r}", amount=value)
    return cents


def format_cents(amount_cents: int) -> str:
    """Format cents as a major-unit string (e.g. 1000050 -> '10000.50')."""
    return f"{Decimal(amount_cents) / 100:.2f}"
