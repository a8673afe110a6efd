"""
EdAiVi Studio Backend: Middleware Tests
=======================================

What:  Sliding-window rate limiting, and the 429 it produces through the
       full application.
"""

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from studio.config import settings
from studio.middleware.rate_limit import SlidingWindowLimiter


class TestSlidingWindowLimiter:

    def test_admits_up_to_the_limit_then_refuses(self):
        limiter = SlidingWindowLimiter(max_requests=2, window_seconds=60)
        assert limiter.hit("1.2.3.4", now=100.0) is None
        assert limiter.hit("1.2.3.4", now=110.0) is None
        assert limiter.hit("1.2.3.4", now=120.0) == 41

    def test_window_slides(self):
        limiter = SlidingWindowLimiter(max_requests=1, window_seconds=10)
        assert limiter.hit("a", now=0.0) is None
        assert limiter.hit("a", now=5.0) is not None
        assert limiter.hit("a", now=10.0) is None

    def test_clients_are_counted_separately(self):
        limiter = SlidingWindowLimiter(max_requests=1, window_seconds=10)
        assert limiter.hit("a", now=0.0) is None
        assert limiter.hit("b", now=0.0) is None

    def test_sweep_forgets_idle_clients(self):
        limiter = SlidingWindowLimiter(max_requests=5, window_seconds=10)
        limiter.hit("old", now=0.0)
        limiter.hit("new", now=15.0)
        assert limiter.sweep(window_start=5.0) == 1
        assert len(limiter) == 1


class TestRateLimitThroughApp:

    @pytest.mark.asyncio
    async def test_third_request_gets_429(self, store):
        from studio.main import create_app

        with patch.object(settings, "rate_limit_requests", 2):
            app = create_app(store)
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                assert (await client.get("/api")).status_code == 200
                assert (await client.get("/api")).status_code == 200
                limited = await client.get("/api", headers={"X-Request-ID": "limited-req-1"})
                # Health checks are never limited.
                health = await client.get("/health")

        assert limited.status_code == 429
        assert limited.json()["error"] == "rate_limit_exceeded"
        assert int(limited.headers["Retry-After"]) >= 1
        assert limited.json()["request_id"] == "limited-req-1"
        assert "timestamp" in limited.json()
        assert health.status_code == 200
