"""Shared read-modify-write loop for ledger use cases."""

import asyncio
from typing import Callable, Optional, Tuple, TypeVar

import structlog

from src.core.config import settings as app_settings
from src.core.metrics import record_ledger_conflict, track_ledger_latency
from src.domain.entities import CustomerLedger
from src.domain.exceptions import LedgerConflictException
from src.domain.interfaces import LedgerRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class LedgerUseCase:
    """
    Base for services that mutate a customer's ledger.

    Every mutation reloads the ledger, applies a pure engine operation and
    saves at the version it was read at. A version conflict reloads and
    retries with exponential backoff.
    """

    def __init__(
        self,
        ledger_repository: LedgerRepository,
        max_retries: Optional[int] = None,
        retry_base_delay: Optional[float] = None,
    ):
        self._ledger_repo = ledger_repository
        self._max_retries = max_retries if max_retries is not None else app_settings.ledger_max_retries
        self._retry_base_delay = (
            retry_base_delay if retry_base_delay is not None else app_settings.ledger_retry_base_delay
        )

    async def _load(self, customer_id: str) -> Optional[CustomerLedger]:
        with track_ledger_latency("get"):
            return await self._ledger_repo.get(customer_id)

    async def _mutate(
        self,
        customer_id: str,
        operation: Callable[[CustomerLedger], T],
    ) -> Tuple[CustomerLedger, T]:
        """
        Apply ``operation`` to the customer's ledger and persist it.

        The operation's result must expose ``applied``; a result with
        ``applied`` False is a replay and is not written back.

        Args:
            customer_id: The customer whose ledger is mutated
            operation: Pure function mutating the ledger in place

        Returns:
            Tuple of (ledger after the write, operation result)

        Raises:
            LedgerConflictException: If every attempt lost the version race
        """
        for attempt in range(self._max_retries + 1):
            ledger = await self._load(customer_id)
            if ledger is None:
                ledger = CustomerLedger(customer_id=customer_id)

            result = operation(ledger)
            if not result.applied:
                return ledger, result

            try:
                with track_ledger_latency("save"):
                    await self._ledger_repo.save(ledger)
                return ledger, result
            except LedgerConflictException:
                record_ledger_conflict()
                if attempt >= self._max_retries:
                    break

                delay = self._retry_base_delay * (2 ** attempt)
                logger.warning(
                    "ledger_conflict_retry",
                    customer_id=customer_id,
                    attempt=attempt + 1,
                    delay=delay,
                )
                await asyncio.sleep(delay)

        logger.error("ledger_conflict_exhausted", customer_id=customer_id)
        raise LedgerConflictException(customer_id)
