"""Checkout redemption endpoints."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import RedemptionCommitRequest, RedemptionQuoteRequest
from src.application.services import RedemptionService
from src.core.dependencies import get_redemption_service
from src.presentation.schemas import (
    AllocationSchema,
    ErrorResponseSchema,
    RedemptionCommitRequestSchema,
    RedemptionCommitResponseSchema,
    RedemptionQuoteRequestSchema,
    RedemptionQuoteResponseSchema,
)

redemption_router = APIRouter(
    prefix="/redemptions",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        503: {"model": ErrorResponseSchema, "description": "Ledger store unavailable"},
    },
)


@redemption_router.post(
    "/quote",
    response_model=RedemptionQuoteResponseSchema,
    summary="Quote Credit Discount",
    description="""
    Compute how much matured store credit may be applied to a cart.

    The amount is the smallest of the matured balance, the cap on the cart
    subtotal and the requested amount. Quoting never modifies the ledger.
    """,
)
async def quote_redemption(
    request: RedemptionQuoteRequestSchema,
    redemption_service: Annotated[RedemptionService, Depends(get_redemption_service)],
) -> RedemptionQuoteResponseSchema:
    dto = RedemptionQuoteRequest(
        customer_id=request.customer_id,
        cart_subtotal_cents=request.cart_subtotal_cents,
        currency=request.currency,
        as_of=request.as_of or datetime.now(timezone.utc),
        requested_cents=request.requested_cents,
    )
    response = await redemption_service.quote(dto)

    return RedemptionQuoteResponseSchema(
        customer_id=response.customer_id,
        amount_to_redeem_cents=response.amount_to_redeem_cents,
        eligible_balance_cents=response.eligible_balance_cents,
        cap_cents=response.cap_cents,
        reason=response.reason,
    )


@redemption_router.post(
    "",
    response_model=RedemptionCommitResponseSchema,
    summary="Commit Redemption",
    description="""
    Deduct credits after an order using them completes.

    Credits are taken from the oldest matured month first. Repeating a
    reference is a no-op.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Insufficient balance or ledger conflict"},
    },
)
async def commit_redemption(
    request: RedemptionCommitRequestSchema,
    redemption_service: Annotated[RedemptionService, Depends(get_redemption_service)],
) -> RedemptionCommitResponseSchema:
    dto = RedemptionCommitRequest(
        customer_id=request.customer_id,
        amount_cents=request.amount_cents,
        as_of=request.as_of or datetime.now(timezone.utc),
        reference=request.reference,
    )
    response = await redemption_service.commit(dto)

    return RedemptionCommitResponseSchema(
        customer_id=response.customer_id,
        amount_cents=response.amount_cents,
        applied=response.applied,
        reference=response.reference,
        allocations=[
            AllocationSchema(month=a.month, amount_cents=a.amount_cents)
            for a in response.allocations
        ],
        remaining_balance_cents=response.remaining_balance_cents,
    )
