"""Customer ledger read endpoints."""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query

from src.application.services import CreditLedgerService
from src.core.dependencies import get_ledger_service
from src.presentation.schemas import (
    BalanceResponseSchema,
    ErrorResponseSchema,
    LedgerResponseSchema,
    MonthListResponseSchema,
)

customers_router = APIRouter(prefix="/customers/{customer_id}")

CustomerId = Annotated[
    str,
    Path(min_length=1, max_length=255, description="Customer identifier"),
]


@customers_router.get(
    "/balance",
    response_model=BalanceResponseSchema,
    summary="Get Credit Balance",
    description="""
    Matured (redeemable) and pending credit balances as of an instant.

    Customers with no ledger report zero balances.
    """,
)
async def get_balance(
    customer_id: CustomerId,
    ledger_service: Annotated[CreditLedgerService, Depends(get_ledger_service)],
    as_of: Annotated[
        Optional[datetime],
        Query(description="Reference instant; defaults to now"),
    ] = None,
) -> BalanceResponseSchema:
    response = await ledger_service.get_balance(
        customer_id,
        as_of or datetime.now(timezone.utc),
    )
    return BalanceResponseSchema(**asdict(response))


@customers_router.get(
    "/ledger",
    response_model=LedgerResponseSchema,
    summary="Get Ledger",
    description="Per-month revenue, earned and redeemed credits plus the credit history.",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Customer has no ledger"},
    },
)
async def get_ledger(
    customer_id: CustomerId,
    ledger_service: Annotated[CreditLedgerService, Depends(get_ledger_service)],
) -> LedgerResponseSchema:
    response = await ledger_service.get_ledger(customer_id)

    return LedgerResponseSchema(
        customer_id=response.customer_id,
        version=response.version,
        months=[asdict(m) for m in response.months],
        history=[asdict(t) for t in response.history],
    )


@customers_router.get(
    "/months",
    response_model=MonthListResponseSchema,
    summary="List Ledger Months",
)
async def list_months(
    customer_id: CustomerId,
    ledger_service: Annotated[CreditLedgerService, Depends(get_ledger_service)],
) -> MonthListResponseSchema:
    response = await ledger_service.list_months(customer_id)
    return MonthListResponseSchema(customer_id=response.customer_id, months=response.months)
