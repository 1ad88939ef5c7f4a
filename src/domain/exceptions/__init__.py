"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .order import (
    InvalidOrderAmountException,
    DuplicateOrderException,
    UnsupportedCurrencyException,
)
from .redemption import (
    InvalidRedemptionRequestException,
    InsufficientBalanceException,
)
from .ledger import (
    CustomerLedgerNotFoundException,
    LedgerConflictException,
    LedgerUnavailableException,
    LedgerCorruptionException,
)

__all__ = [
    "DomainException",
    "InvalidOrderAmountException",
    "DuplicateOrderException",
    "UnsupportedCurrencyException",
    "InvalidRedemptionRequestException",
    "InsufficientBalanceException",
    "CustomerLedgerNotFoundException",
    "LedgerConflictException",
    "LedgerUnavailableException",
    "LedgerCorruptionException",
]
