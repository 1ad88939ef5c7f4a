"""Order intake endpoints."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import OrderEvent, OrderRecordResponse
from src.application.services import CreditLedgerService
from src.core.dependencies import get_ledger_service
from src.service.credit import to_cents
from src.presentation.schemas import (
    ErrorResponseSchema,
    OrderEventSchema,
    OrderRecordResponseSchema,
    OrdersPaidWebhookSchema,
)

orders_router = APIRouter(
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid order"},
        409: {"model": ErrorResponseSchema, "description": "Ledger conflict"},
        503: {"model": ErrorResponseSchema, "description": "Ledger store unavailable"},
    },
)


def _to_schema(response: OrderRecordResponse) -> OrderRecordResponseSchema:
    return OrderRecordResponseSchema(
        order_id=response.order_id,
        customer_id=response.customer_id,
        outcome=response.outcome.value,
        month=response.month,
        credit_earned_cents=response.credit_earned_cents,
        rate_basis_points=response.rate_basis_points,
        month_revenue_cents=response.month_revenue_cents,
        month_earned_cents=response.month_earned_cents,
    )


@orders_router.post(
    "/orders",
    response_model=OrderRecordResponseSchema,
    status_code=200,
    summary="Record Paid Order",
    description="""
    Apply a paid order to the customer's monthly ledger.

    Redelivering an order id is a no-op that reports outcome "duplicate".
    Guest orders are acknowledged with outcome "ignored".
    """,
)
async def record_order(
    request: OrderEventSchema,
    ledger_service: Annotated[CreditLedgerService, Depends(get_ledger_service)],
) -> OrderRecordResponseSchema:
    event = OrderEvent(
        order_id=request.order_id,
        customer_id=request.customer_id,
        order_total_cents=request.order_total_cents,
        currency=request.currency,
        processed_at=request.processed_at,
    )
    response = await ledger_service.record_order(event)
    return _to_schema(response)


@orders_router.post(
    "/webhooks/orders-paid",
    response_model=OrderRecordResponseSchema,
    status_code=200,
    summary="Orders Paid Webhook",
    description="""
    Receive the storefront's orders/paid webhook.

    The order total arrives as a decimal string in major units and is
    converted to cents with half-up rounding.
    """,
)
async def orders_paid_webhook(
    payload: OrdersPaidWebhookSchema,
    ledger_service: Annotated[CreditLedgerService, Depends(get_ledger_service)],
) -> OrderRecordResponseSchema:
    processed_at = payload.processed_at or payload.created_at or datetime.now(timezone.utc)
    customer_id = str(payload.customer.id) if payload.customer else None

    event = OrderEvent(
        order_id=str(payload.id),
        customer_id=customer_id,
        order_total_cents=to_cents(payload.total_price),
        currency=payload.currency,
        processed_at=processed_at,
    )
    response = await ledger_service.record_order(event)
    return _to_schema(response)
