"""Order intake Pydantic schemas."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderEventSchema(BaseModel):
    """Schema for POST /v1/orders request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "order_id": "1001",
                    "customer_id": "cust_42",
                    "order_total_cents": 1200000,
                    "currency": "USD",
                    "processed_at": "2024-01-15T10:30:00Z",
                }
            ]
        }
    )
    order_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Unique order identifier, used for deduplication",
    )
    customer_id: Optional[str] = Field(
        None,
        max_length=255,
        description="Customer identifier; omitted for guest checkouts",
    )
    order_total_cents: int = Field(
        ...,
        ge=0,
        description="Order total in cents",
        examples=[1200000],
    )
    currency: str = Field(
        "USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code",
    )
    processed_at: datetime = Field(
        ...,
        description="When the order was paid; selects the month bucket",
    )

    @field_validator("order_id")
    @classmethod
    def validate_order_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("order_id cannot be empty or whitespace")
        return v.strip()

    @field_validator("customer_id")
    @classmethod
    def normalize_customer_id(cls, v: Optional[str]) -> Optional[str]:
        """Blank ids are guests."""
        if v is None or not v.strip():
            return None
        return v.strip()


class WebhookCustomerSchema(BaseModel):
    id: Union[int, str]


class OrdersPaidWebhookSchema(BaseModel):
    """
    Schema for the storefront's orders/paid webhook payload.

    Only the fields the ledger needs are declared; everything else in the
    payload is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: Union[int, str] = Field(..., description="Storefront order id")
    customer: Optional[WebhookCustomerSchema] = Field(
        None,
        description="Ordering customer; null for guest checkouts",
    )
    total_price: str = Field(
        ...,
        description="Order total in major units, e.g. \"12000.00\"",
        examples=["12000.00"],
    )
    currency: str = Field("USD", min_length=3, max_length=3)
    processed_at: Optional[datetime] = Field(
        None,
        description="Payment time; falls back to created_at",
    )
    created_at: Optional[datetime] = None


class OrderRecordResponseSchema(BaseModel):
    """Schema for order intake responses."""

    order_id: str
    customer_id: Optional[str] = None
    outcome: str = Field(
        ...,
        description="applied, duplicate or ignored",
        examples=["applied"],
    )
    month: Optional[str] = Field(None, examples=["2024-01"])
    credit_earned_cents: int = Field(0, ge=0)
    rate_basis_points: int = Field(0, ge=0, examples=[200])
    month_revenue_cents: int = Field(0, ge=0)
    month_earned_cents: int = Field(0, ge=0)
