"""Ledger store domain exceptions."""

from .base import DomainException


class CustomerLedgerNotFoundException(DomainException):
    """Raised when a customer has no ledger yet."""

    def __init__(self, customer_id: str):
        super().__init__(
            message=f"No credit ledger for customer: {customer_id}",
            code="CUSTOMER_LEDGER_NOT_FOUND",
        )
        self.customer_id = customer_id


class LedgerConflictException(DomainException):
    """Raised when a ledger was modified concurrently since it was read."""

    def __init__(self, customer_id: str, expected_version: int | None = None):
        super().__init__(
            message=f"Ledger for customer {customer_id} was modified concurrently",
            code="LEDGER_CONFLICT",
        )
        self.customer_id = customer_id
        self.expected_version = expected_version


class LedgerUnavailableException(DomainException):
    """Raised when the ledger store cannot be reached or errors out."""

    def __init__(self, message: str = "Ledger store unavailable"):
        super().__init__(
            message=message,
            code="LEDGER_UNAVAILABLE",
        )


class LedgerCorruptionException(DomainException):
    """
    Raised when stored ledger state is malformed.

    Corrupt financial data is never defaulted to zero.
    """

    def __init__(self, message: str, customer_id: str | None = None):
        super().__init__(
            message=message,
            code="LEDGER_CORRUPTION",
        )
        self.customer_id = customer_id
