"""
Store Credit Gateway - Main Application Entry Point

A tiered store-credit service: paid orders earn credits at a rate set by
the customer's monthly revenue, credits mature at the start of the next
month, and matured credits are redeemed at checkout up to a cap.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from src import __version__
from src.core.config import settings
from src.core.logging import setup_logging
from src.core.metrics import get_metrics, get_metrics_content_type
from src.infrastructure.database import db_manager
from src.presentation.api import api_router
from src.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Sets up logging and the ledger store's connection pool on startup and
    disposes of the pool on shutdown.
    """
    setup_logging()
    db_manager.init()

    logger = structlog.get_logger(__name__)
    logger.info(
        "application_started",
        service=settings.app_name,
        version=__version__,
        currency=settings.ledger_currency,
    )

    yield

    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="Store Credit Gateway",
    description="Tiered store-credit ledger and checkout redemption service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    if not settings.metrics_enabled:
        return Response(status_code=404)
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""
    return RedirectResponse(url="/docs")
