"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    DomainException,
    CustomerLedgerNotFoundException,
    InsufficientBalanceException,
    InvalidOrderAmountException,
    InvalidRedemptionRequestException,
    LedgerConflictException,
    LedgerCorruptionException,
    LedgerUnavailableException,
    UnsupportedCurrencyException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
    )


def _domain_response(
    status_code: int,
    exc: DomainException,
    message: str | None = None,
) -> JSONResponse:
    content = exc.to_dict()
    if message is not None:
        content["message"] = message
    content["request_id"] = get_request_id()
    return JSONResponse(status_code=status_code, content=content)


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(CustomerLedgerNotFoundException)
    async def ledger_not_found_handler(
        request: Request,
        exc: CustomerLedgerNotFoundException,
    ) -> JSONResponse:
        """Handle unknown customer ledgers."""
        return _domain_response(404, exc)

    @app.exception_handler(InvalidOrderAmountException)
    @app.exception_handler(InvalidRedemptionRequestException)
    @app.exception_handler(UnsupportedCurrencyException)
    async def invalid_request_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle invalid request errors."""
        return _domain_response(400, exc)

    @app.exception_handler(InsufficientBalanceException)
    async def insufficient_balance_handler(
        request: Request,
        exc: InsufficientBalanceException,
    ) -> JSONResponse:
        """Handle redemptions larger than the matured balance."""
        logger.info(
            "redemption_rejected",
            request_id=get_request_id(),
            requested=exc.requested_cents,
            available=exc.available_cents,
        )
        return _domain_response(409, exc)

    @app.exception_handler(LedgerConflictException)
    async def ledger_conflict_handler(
        request: Request,
        exc: LedgerConflictException,
    ) -> JSONResponse:
        """Handle writers that kept losing the version race."""
        logger.warning(
            "ledger_conflict",
            request_id=get_request_id(),
            customer_id=exc.customer_id,
        )
        return _domain_response(409, exc, "Ledger was modified concurrently. Please retry.")

    @app.exception_handler(LedgerUnavailableException)
    async def ledger_unavailable_handler(
        request: Request,
        exc: LedgerUnavailableException,
    ) -> JSONResponse:
        """Handle ledger store outages."""
        logger.error(
            "ledger_unavailable",
            request_id=get_request_id(),
            message=exc.message,
        )
        return _domain_response(503, exc, "Service temporarily unavailable. Please try again.")

    @app.exception_handler(LedgerCorruptionException)
    async def ledger_corruption_handler(
        request: Request,
        exc: LedgerCorruptionException,
    ) -> JSONResponse:
        """Handle stored ledgers that fail validation."""
        logger.error(
            "ledger_corruption",
            request_id=get_request_id(),
            customer_id=exc.customer_id,
            message=exc.message,
        )
        return _domain_response(500, exc)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _domain_response(400, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")
