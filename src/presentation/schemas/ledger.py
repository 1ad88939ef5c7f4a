"""Ledger view Pydantic schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class BalanceResponseSchema(BaseModel):
    """Schema for GET /v1/customers/{customer_id}/balance."""

    customer_id: str
    as_of: str
    redeemable_balance_cents: int = Field(..., ge=0)
    pending_credits_cents: int = Field(
        ...,
        ge=0,
        description="Credits earned this month, redeemable from next month",
    )
    lifetime_revenue_cents: int = Field(..., ge=0)
    lifetime_earned_cents: int = Field(..., ge=0)
    lifetime_redeemed_cents: int = Field(..., ge=0)


class LedgerMonthSchema(BaseModel):
    month: str = Field(..., examples=["2024-01"])
    revenue_cents: int
    earned_cents: int
    redeemed_cents: int
    balance_cents: int


class CreditTransactionSchema(BaseModel):
    id: str = Field(..., description="Transaction id")
    kind: str = Field(..., examples=["earned"])
    amount_cents: int
    month: str
    reference: Optional[str] = None
    description: str
    created_at: str


class LedgerResponseSchema(BaseModel):
    """Schema for GET /v1/customers/{customer_id}/ledger."""

    customer_id: str
    version: int
    months: List[LedgerMonthSchema]
    history: List[CreditTransactionSchema]


class MonthListResponseSchema(BaseModel):
    customer_id: str
    months: List[str]
