"""Request/response logging middleware with timing and HTTP metrics."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.routing import NoMatchFound
from starlette.responses import Response

from src.core.metrics import record_http_request
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _endpoint_label(request: Request) -> str:
    """Route template (e.g. /v1/customers/{customer_id}/balance) to bound label cardinality."""
    route = request.scope.get("route")
    name = getattr(route, "name", None)
    if name is None:
        return "unmatched"

    # Included routers may hold the route without its prefix; resolving the
    # name with placeholder params yields the full mounted template.
    placeholders = {key: "{" + key + "}" for key in request.path_params}
    try:
        return str(request.app.url_path_for(name, **placeholders))
    except NoMatchFound:
        return getattr(route, "path", None) or "unmatched"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its outcome and duration, and records HTTP metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method

        log = logger.bind(
            request_id=get_request_id(),
            method=method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            record_http_request(method, _endpoint_label(request), 500, duration)
            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            raise

        duration = time.perf_counter() - start_time
        if request.url.path != "/metrics":
            record_http_request(method, _endpoint_label(request), response.status_code, duration)

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        return response
