"""
EdAiVi Studio Backend: Request Logging Middleware
=================================================

What:  One access-log line per HTTP request with status and duration.
How:   Times the downstream call and logs to the `studio.access` logger.
       The level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.
       Structured fields travel in `extra` for JSON log handlers.

Only method, path, status, duration, client address and request id are
logged. Bodies and Authorization headers never are (passwords, tokens).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from studio.middleware.request_id import request_id_var

logger = logging.getLogger("studio.access")

# Polled by load balancers every few seconds.
QUIET_PATHS = {"/health"}


def status_log_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            status_log_level(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
