"""Repository implementations."""

from .ledger_repository import PostgresLedgerRepository

__all__ = [
    "PostgresLedgerRepository",
]
