"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import CustomerLedger, MonthKey


class LedgerRepository(ABC):
    """
    Abstract ledger store keyed by (customer_id, MonthKey).

    Implementations must make ``save`` atomic per customer and reject
    writes based on a stale ``CustomerLedger.version``.
    """

    @abstractmethod
    async def get(self, customer_id: str) -> Optional[CustomerLedger]:
        """
        Load a customer's ledger.

        Args:
            customer_id: The customer's identifier

        Returns:
            The ledger if the customer has one, None otherwise

        Raises:
            LedgerCorruptionException: If stored rows are malformed
            LedgerUnavailableException: If the store errors out
        """
        ...

    @abstractmethod
    async def save(self, ledger: CustomerLedger) -> CustomerLedger:
        """
        Persist a ledger that was read at ``ledger.version``.

        Args:
            ledger: The mutated ledger

        Returns:
            The ledger with its version advanced

        Raises:
            LedgerConflictException: If the stored version moved on
            DuplicateOrderException: If an order id is already stored
            LedgerUnavailableException: If the store errors out
        """
        ...

    @abstractmethod
    async def list_months(self, customer_id: str) -> List[MonthKey]:
        """
        List the months a customer has entries for.

        Args:
            customer_id: The customer's identifier

        Returns:
            Month keys in ascending order (empty if no ledger)
        """
        ...
