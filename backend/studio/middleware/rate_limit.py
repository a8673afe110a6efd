"""
EdAiVi Studio Backend: Rate Limiting Middleware
===============================================

What:  Per-IP sliding-window limit on HTTP requests.
How:   Keeps the timestamps of each client's requests inside the window.
       A client already at `settings.rate_limit_requests` gets a 429 with
       a Retry-After header instead of reaching the route.
Who:   Outermost middleware; every HTTP route except health and the docs.

The counters live in process memory, so each worker process limits on its
own. Defaults: 100 requests per 15 minutes.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from studio.config import settings
from studio.exceptions import RateLimitExceededError
from studio.middleware.request_id import REQUEST_ID_HEADER
from studio.schemas.common import error_body

logger = logging.getLogger(__name__)

EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

# Sweep idle clients once this many have been seen.
SWEEP_THRESHOLD = 1000


class SlidingWindowLimiter:
    """Request timestamps per key, trimmed to the trailing window on every hit."""

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def hit(self, key: str, now: Optional[float] = None) -> Optional[int]:
        """
        Record a request for `key`.

        Returns None when the request is admitted, or the number of seconds
        until the oldest hit leaves the window when it is refused. Refused
        requests are not recorded.
        """
        now = time.time() if now is None else now
        window_start = now - self.window_seconds
        hits = self._hits[key]
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            return int(hits[0] + self.window_seconds - now) + 1

        hits.append(now)
        if len(self._hits) > SWEEP_THRESHOLD:
            self.sweep(window_start)
        return None

    def sweep(self, window_start: float) -> int:
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in idle:
            del self._hits[key]
        if idle:
            logger.debug("Rate limiter dropped %d idle clients", len(idle))
        return len(idle)

    def __len__(self) -> int:
        return len(self._hits)


class RateLimitMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, max_requests: Optional[int] = None, window_seconds: Optional[int] = None):
        super().__init__(app)
        self.limiter = SlidingWindowLimiter(
            max_requests or settings.rate_limit_requests,
            window_seconds or settings.rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        retry_after = self.limiter.hit(client_ip)
        if retry_after is None:
            return await call_next(request)

        logger.warning(
            "Rate limit exceeded for %s (%d requests / %ds)",
            client_ip,
            self.limiter.max_requests,
            self.limiter.window_seconds,
        )
        # Raised exceptions would bypass the app's handlers at this layer.
        exc = RateLimitExceededError(retry_after=retry_after)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                exc.error_code,
                exc.message,
                exc.context,
                request_id=request.headers.get(REQUEST_ID_HEADER),
            ),
            headers={"Retry-After": str(retry_after)},
        )
