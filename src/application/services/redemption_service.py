"""Redemption service - checkout quotes and committed redemptions."""

from typing import Optional

import structlog

from src.core.config import settings as app_settings
from src.core.metrics import record_redemption_commit, record_redemption_quote
from src.domain.exceptions import (
    InvalidRedemptionRequestException,
    UnsupportedCurrencyException,
)
from src.domain.interfaces import LedgerRepository
from src.application.dto import (
    RedemptionCommitRequest,
    RedemptionCommitResponse,
    RedemptionQuoteRequest,
    RedemptionQuoteResponse,
)
from src.service.credit import (
    CreditSettings,
    compute_redemption,
    credit_settings,
    has_customer,
    record_redemption,
    redeemable_balance,
)

from .base import LedgerUseCase

logger = structlog.get_logger(__name__)


class RedemptionService(LedgerUseCase):
    """
    Application service for redeeming store credit at checkout.

    Quotes never modify the ledger; only ``commit`` deducts credits.
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

    async def quote(self, request: RedemptionQuoteRequest) -> RedemptionQuoteResponse:
        """
        Compute the credit discount available for a cart.

        Args:
            request: Customer, cart subtotal and optional requested amount

        Returns:
            RedemptionQuoteResponse; a zero amount carries a reason

        Raises:
            InvalidRedemptionRequestException: If request validation fails
            UnsupportedCurrencyException: If the cart is not in the ledger currency
        """
        errors = request.validate()
        if errors:
            raise InvalidRedemptionRequestException("; ".join(errors))

        if request.currency.upper() != self._currency:
            raise UnsupportedCurrencyException(request.currency, self._currency)

        ledger = None
        if has_customer(request.customer_id):
            ledger = await self._load(request.customer_id)

        result = compute_redemption(
            customer_id=request.customer_id,
            ledger=ledger,
            cart_subtotal_cents=request.cart_subtotal_cents,
            now=request.as_of,
            requested_cents=request.requested_cents,
            settings=self._settings,
        )

        outcome = "redeemable" if result.redeemable else result.reason.value
        record_redemption_quote(outcome)
        logger.info(
            "redemption_quoted",
            customer_id=request.customer_id,
            cart_subtotal=request.cart_subtotal_cents,
            outcome=outcome,
            **result.to_dict(),
        )

        return RedemptionQuoteResponse.from_result(request.customer_id, result)

    async def commit(self, request: RedemptionCommitRequest) -> RedemptionCommitResponse:
        """
        Deduct a confirmed redemption from the customer's matured credits.

        Args:
            request: Customer, amount and optional idempotency reference

        Returns:
            RedemptionCommitResponse with per-month allocations; ``applied``
            is False when the reference was already committed

        Raises:
            InvalidRedemptionRequestException: If request validation fails
            InsufficientBalanceException: If the amount exceeds the matured balance
            LedgerConflictException: If concurrent writers exhausted the retries
        """
        errors = request.validate()
        if errors:
            raise InvalidRedemptionRequestException("; ".join(errors))

        log = logger.bind(
            customer_id=request.customer_id,
            amount=request.amount_cents,
            reference=request.reference,
        )

        ledger, commit = await self._mutate(
            request.customer_id,
            lambda ledger: record_redemption(
                ledger,
                request.amount_cents,
                request.as_of,
                request.reference,
            ),
        )

        if commit.applied:
            record_redemption_commit(commit.amount_cents)
            log.info(
                "redemption_committed",
                allocations={str(a.month): a.amount_cents for a in commit.allocations},
            )
        else:
            log.info("redemption_duplicate")

        return RedemptionCommitResponse.from_commit(
            commit,
            remaining_balance_cents=redeemable_balance(ledger, request.as_of),
        )
