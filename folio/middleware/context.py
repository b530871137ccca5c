"""
Request ids for every request the app serves.

``X-Request-ID`` is taken from the caller when it is safe to log, otherwise
generated, and echoed on the response. An incoming ``X-Correlation-ID`` is
kept, echoed, and forwarded to the functions by the function clients.
"""

import re
import time
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from folio.core import context

logger = structlog.get_logger(__name__)

SLOW_REQUEST_MS = 500.0

# Bounded and log-injection safe
_SAFE_ID = re.compile(r"[A-Za-z0-9_\-]{1,64}")


def safe_id(value: Optional[str]) -> Optional[str]:
    if value and _SAFE_ID.fullmatch(value):
        return value
    return None


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = safe_id(request.headers.get("X-Request-ID")) or context.new_request_id()
        correlation_id = safe_id(request.headers.get("X-Correlation-ID"))
        context.reset()
        context.bind(
            request_id=request_id,
            correlation_id=correlation_id,
            path=request.url.path,
            method=request.method,
        )

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
            if status_code >= 500 or elapsed_ms >= SLOW_REQUEST_MS:
                logger.warning("Slow or failed request", status_code=status_code, duration_ms=elapsed_ms)
            context.reset()

        response.headers["X-Request-ID"] = request_id
        if correlation_id:
            response.headers["X-Correlation-ID"] = correlation_id
        return response
