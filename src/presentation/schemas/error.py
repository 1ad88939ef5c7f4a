"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["INSUFFICIENT_BALANCE"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Redemption of 5000 cents exceeds matured balance of 1200 cents"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "CUSTOMER_LEDGER_NOT_FOUND",
                    "message": "No credit ledger for customer: cust_42",
                    "request_id": "abc123",
                }
            ]
        }
    }
