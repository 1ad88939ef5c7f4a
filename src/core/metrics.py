"""Prometheus metrics for the Store Credit Gateway service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- store_credit_orders_total: Order events by outcome
- store_credit_earned_cents_total: Credits earned
- store_credit_redemption_quotes_total: Quotes by outcome
- store_credit_redeemed_cents_total: Credits redeemed

Technical Metrics (for Engineering/SRE):
- store_credit_ledger_latency_seconds: Ledger operation latency
- store_credit_ledger_conflicts_total: Optimistic-lock conflicts
- store_credit_ledger_errors_total: Ledger store errors
- store_credit_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

orders_total = Counter(
    "store_credit_orders_total",
    "Total number of order events processed",
    ["outcome"],  # applied, duplicate, ignored, rejected
)

credits_earned_cents = Counter(
    "store_credit_earned_cents_total",
    "Total credits earned in cents",
)

redemption_quotes_total = Counter(
    "store_credit_redemption_quotes_total",
    "Total number of redemption quotes",
    ["outcome"],  # redeemable, or the zero reason
)

credits_redeemed_cents = Counter(
    "store_credit_redeemed_cents_total",
    "Total credits redeemed in cents",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

ledger_latency = Histogram(
    "store_credit_ledger_latency_seconds",
    "Ledger operation latency in seconds",
    ["operation"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

ledger_conflicts = Counter(
    "store_credit_ledger_conflicts_total",
    "Total number of optimistic-lock conflicts on ledger saves",
)

ledger_errors = Counter(
    "store_credit_ledger_errors_total",
    "Total number of ledger store errors",
    ["error_type"],  # unavailable, corruption
)

http_requests_total = Counter(
    "store_credit_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "store_credit_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_order_outcome(outcome: str, credit_cents: int = 0) -> None:
    """Record a processed order event."""
    orders_total.labels(outcome=outcome).inc()
    if credit_cents > 0:
        credits_earned_cents.inc(credit_cents)


def record_redemption_quote(outcome: str) -> None:
    """Record a redemption quote by outcome."""
    redemption_quotes_total.labels(outcome=outcome).inc()


def record_redemption_commit(amount_cents: int) -> None:
    """Record a committed redemption."""
    credits_redeemed_cents.inc(amount_cents)


def record_ledger_conflict() -> None:
    """Record an optimistic-lock conflict."""
    ledger_conflicts.inc()


def record_ledger_error(error_type: str) -> None:
    """Record a ledger store error."""
    ledger_errors.labels(error_type=error_type).inc()


@contextmanager
def track_ledger_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track ledger operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        ledger_latency.labels(operation=operation).observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
