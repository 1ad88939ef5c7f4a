"""Redemption Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RedemptionQuoteRequestSchema(BaseModel):
    """Schema for POST /v1/redemptions/quote request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "customer_id": "cust_42",
                    "cart_subtotal_cents": 2000000,
                    "currency": "USD",
                }
            ]
        }
    )
    customer_id: Optional[str] = Field(
        None,
        max_length=255,
        description="Customer identifier; omitted for guest checkouts",
    )
    cart_subtotal_cents: int = Field(..., ge=0, description="Cart subtotal in cents")
    requested_cents: Optional[int] = Field(
        None,
        ge=0,
        description="Amount of credit the customer asked to apply",
    )
    currency: str = Field("USD", min_length=3, max_length=3)
    as_of: Optional[datetime] = Field(
        None,
        description="Reference instant for maturation; defaults to now",
    )


class RedemptionQuoteResponseSchema(BaseModel):
    customer_id: Optional[str] = None
    amount_to_redeem_cents: int = Field(..., ge=0)
    eligible_balance_cents: int = Field(..., ge=0)
    cap_cents: int = Field(..., ge=0)
    reason: Optional[str] = Field(
        None,
        description="Why the amount is zero, if it is",
        examples=["no matured credits"],
    )


class RedemptionCommitRequestSchema(BaseModel):
    """Schema for POST /v1/redemptions request body."""

    customer_id: str = Field(..., min_length=1, max_length=255)
    amount_cents: int = Field(..., gt=0, description="Credits to deduct in cents")
    reference: Optional[str] = Field(
        None,
        max_length=255,
        description="Idempotency reference, typically the order id",
    )
    as_of: Optional[datetime] = Field(
        None,
        description="Reference instant for maturation; defaults to now",
    )


class AllocationSchema(BaseModel):
    month: str = Field(..., examples=["2024-01"])
    amount_cents: int = Field(..., gt=0)


class RedemptionCommitResponseSchema(BaseModel):
    customer_id: str
    amount_cents: int
    applied: bool = Field(..., description="False when the reference was already committed")
    reference: Optional[str] = None
    allocations: List[AllocationSchema]
    remaining_balance_cents: int = Field(..., ge=0)
