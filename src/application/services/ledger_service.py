"""Credit ledger service - orchestrates order intake and balance reads."""

from datetime import datetime
from typing import Optional

import structlog

from src.core.config import settings as app_settings
from src.core.metrics import record_order_outcome
from src.domain.exceptions import (
    CustomerLedgerNotFoundException,
    DuplicateOrderException,
    InvalidOrderAmountException,
    UnsupportedCurrencyException,
)
from src.domain.interfaces import LedgerRepository
from src.application.dto import (
    BalanceResponse,
    LedgerResponse,
    MonthListResponse,
    OrderEvent,
    OrderOutcome,
    OrderRecordResponse,
)
from src.service.credit import (
    CreditSettings,
    credit_settings,
    has_customer,
    pending_credits,
    record_order,
    redeemable_balance,
)

from .base import LedgerUseCase

logger = structlog.get_logger(__name__)


class CreditLedgerService(LedgerUseCase):
    """
    Application service for the credit ledger.

    Turns paid-order events into ledger updates and serves balance views.
    """

    def __init__(
        self,
        ledger_repository: LedgerRepository,
        settings: CreditSettings = credit_settings,
        currency: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_base_delay: Optional[float] = None,
    ):
        super().__init__(ledger_repository, max_retries, retry_base_delay)
        self._settings = settings
        self._currency = (currency or app_settings.ledger_currency).upper()

    async def record_order(self, event: OrderEvent) -> OrderRecordResponse:
        """
        Apply a paid order to the customer's ledger.

        Args:
            event: The order event (may be a redelivery)

        Returns:
            OrderRecordResponse; outcome is "duplicate" for an order id
            that was already applied and "ignored" for guest orders

        Raises:
            InvalidOrderAmountException: If the event fails validation
            UnsupportedCurrencyException: If the order is not in the ledger currency
            LedgerConflictException: If concurrent writers exhausted the retries
        """
        errors = event.validate()
        if errors:
            record_order_outcome("rejected")
            raise InvalidOrderAmountException("; ".join(errors), amount=event.order_total_cents)

        if event.currency.upper() != self._currency:
            record_order_outcome("rejected")
            raise UnsupportedCurrencyException(event.currency, self._currency)

        log = logger.bind(order_id=event.order_id, customer_id=event.customer_id)

        if not has_customer(event.customer_id):
            record_order_outcome(OrderOutcome.IGNORED.value)
            log.info("order_ignored", reason="no customer")
            return OrderRecordResponse(
                order_id=event.order_id,
                customer_id=None,
                outcome=OrderOutcome.IGNORED,
            )

        try:
            _, result = await self._mutate(
                event.customer_id,
                lambda ledger: record_order(
                    ledger,
                    event.order_id,
                    event.order_total_cents,
                    event.processed_at,
                    self._settings,
                ),
            )
        except DuplicateOrderException:
            # Order id already applied, possibly on another customer's ledger
            record_order_outcome(OrderOutcome.DUPLICATE.value)
            log.info("order_duplicate", scope="store")
            return OrderRecordResponse(
                order_id=event.order_id,
                customer_id=event.customer_id,
                outcome=OrderOutcome.DUPLICATE,
            )

        response = OrderRecordResponse.from_result(result)

        if result.applied:
            record_order_outcome(OrderOutcome.APPLIED.value, result.credit_cents)
            log.info(
                "order_recorded",
                month=str(result.month),
                order_total=result.order_total_cents,
                rate_bps=result.rate_bps,
                credit_earned=result.credit_cents,
                month_revenue=result.month_revenue_cents,
            )
        else:
            record_order_outcome(OrderOutcome.DUPLICATE.value)
            log.info("order_duplicate", scope="ledger")

        return response

    async def get_balance(self, customer_id: str, as_of: datetime) -> BalanceResponse:
        """
        Get a customer's redeemable and pending balances.

        Customers without a ledger have zero balances.

        Args:
            customer_id: The customer's identifier
            as_of: The reference instant for maturation

        Returns:
            BalanceResponse
        """
        ledger = await self._load(customer_id)

        return BalanceResponse(
            customer_id=customer_id,
            as_of=as_of.isoformat(),
            redeemable_balance_cents=redeemable_balance(ledger, as_of),
            pending_credits_cents=pending_credits(ledger, as_of),
            lifetime_revenue_cents=ledger.lifetime_revenue_cents if ledger else 0,
            lifetime_earned_cents=ledger.lifetime_earned_cents if ledger else 0,
            lifetime_redeemed_cents=ledger.lifetime_redeemed_cents if ledger else 0,
        )

    async def get_ledger(self, customer_id: str) -> LedgerResponse:
        """
        Get the full per-month ledger and credit history.

        Raises:
            CustomerLedgerNotFoundException: If the customer has no ledger
        """
        ledger = await self._load(customer_id)
        if ledger is None:
            raise CustomerLedgerNotFoundException(customer_id)
        return LedgerResponse.from_entity(ledger)

    async def list_months(self, customer_id: str) -> MonthListResponse:
        """List the months that have ledger entries, oldest first."""
        months = await self._ledger_repo.list_months(customer_id)
        return MonthListResponse(
            customer_id=customer_id,
            months=[str(m) for m in months],
        )
