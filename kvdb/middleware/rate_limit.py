"""
Rate Limit Middleware Module

Implements global API rate limiting with a single token bucket shared by all
requests handled by this process.
"""

import logging
import math
import threading
import time
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from kvdb.common.errors import RateLimitedError
from kvdb.config import get_settings

logger = logging.getLogger(__name__)

EXCLUDED_PATHS = frozenset({
    "/",
    "/health",
    "/api-doc/openapi.json",
    "/favicon.ico",
})


class TokenBucket:
    """
    Token bucket rate limiter.

    Holds up to `burst` tokens and refills continuously at `rate` tokens per
    second. The token count and refill timestamp are updated under one lock.
    """

    def __init__(
        self,
        rate: float,
        burst: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be > 0")
        if burst < 1:
            raise ValueError("burst must be >= 1")

        self.rate = float(rate)
        self.burst = burst
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens = float(burst)
        self._last_refill = clock()

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._last_refill)
        self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
        self._last_refill = now

    def try_acquire(self) -> tuple[bool, float]:
        """
        Take one token if available.

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
        """
        with self._lock:
            self._refill(self._clock())
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return True, 0.0
            return False, (1.0 - self._tokens) / self.rate

    @property
    def available(self) -> int:
        """Whole tokens currently available"""
        with self._lock:
            self._refill(self._clock())
            return int(self._tokens)

    def reset(self) -> None:
        """Refill the bucket to its burst size."""
        with self._lock:
            self._tokens = float(self.burst)
            self._last_refill = self._clock()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate Limit Middleware

    Every request except health and documentation paths takes one token from
    the shared bucket. Rejected requests never reach a route handler.
    """

    def __init__(self, app: ASGIApp, limiter: Optional[TokenBucket] = None) -> None:
        super().__init__(app)
        settings = get_settings()
        self.enabled = settings.RATE_LIMIT_ENABLED
        self._limiter = limiter or TokenBucket(
            rate=settings.RATE_LIMIT_PER_SECOND,
            burst=settings.RATE_LIMIT_BURST_SIZE,
        )

        logger.info(
            f"Rate limit middleware initialized: enabled={self.enabled}, "
            f"rate={self._limiter.rate}/s, burst={self._limiter.burst}"
        )

    @property
    def limiter(self) -> TokenBucket:
        return self._limiter

    def _is_excluded_path(self, path: str) -> bool:
        """Check if path should be excluded from rate limiting."""
        return path in EXCLUDED_PATHS or path.startswith("/docs")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through rate limiter."""
        # Skip if rate limiting is disabled
        if not self.enabled:
            return await call_next(request)

        path = request.url.path

        if self._is_excluded_path(path):
            return await call_next(request)

        is_allowed, retry_after = self._limiter.try_acquire()

        if not is_allowed:
            retry_after_s = max(1, math.ceil(retry_after))
            logger.warning(
                f"Rate limit exceeded: method={request.method}, path={path}, "
                f"rate={self._limiter.rate}/s, burst={self._limiter.burst}"
            )
            error = RateLimitedError(retry_after=retry_after_s)
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers={
                    "X-RateLimit-Limit": str(self._limiter.burst),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after_s),
                },
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(self._limiter.burst)
        response.headers["X-RateLimit-Remaining"] = str(self._limiter.available)

        return response
