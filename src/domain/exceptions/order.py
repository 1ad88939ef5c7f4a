"""Order intake domain exceptions."""

from .base import DomainException


class InvalidOrderAmountException(DomainException):
    """Raised when an order total is negative, non-finite or malformed."""

    def __init__(self, message: str, amount: object = None):
        super().__init__(
            message=message,
            code="INVALID_ORDER_AMOUNT",
        )
        self.amount = amount


class DuplicateOrderException(DomainException):
    """
    Raised by the ledger store when an order id was already applied.

    Callers treat this as a no-op success to keep order intake idempotent.
    """

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order already applied: {order_id}",
            code="DUPLICATE_ORDER",
        )
        self.order_id = order_id


class UnsupportedCurrencyException(DomainException):
    """Raised when an amount is not in the ledger currency."""

    def __init__(self, currency: str, expected: str):
        super().__init__(
            message=f"Unsupported currency {currency!r}, ledger uses {expected!r}",
            code="UNSUPPORTED_CURRENCY",
        )
        self.currency = currency
        self.expected = expected
