"""
Request middleware: correlation IDs and one access line per pool request.
"""
import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from betpool.core.logging import correlation_id_var, get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Scrape and probe traffic is not worth a log line per request
UNLOGGED_PATHS = ("/metrics", "/health")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Take ``X-Correlation-ID`` from the request (or mint one), make it visible
    to every log call made while handling the request, and echo it back.

    Mutating requests (bets, outcomes, logins) are logged at INFO with their
    status and timing; reads only at DEBUG since clients poll the state.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        token = correlation_id_var.set(correlation_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id

            path = request.url.path
            if path not in UNLOGGED_PATHS:
                level = logging.DEBUG if request.method == "GET" else logging.INFO
                logger.log(
                    level,
                    f"{request.method} {path} -> {response.status_code}",
                    extra={
                        "method": request.method,
                        "path": path,
                        "status_code": response.status_code,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                    },
                )
            return response
        finally:
            correlation_id_var.reset(token)
