"""
Rate Limit Middleware Unit Tests

Tests for the token bucket and the rate limiting middleware.
"""

import threading

import pytest
from unittest.mock import MagicMock, patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from kvdb.middleware.rate_limit import RateLimitMiddleware, TokenBucket


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTokenBucket:
    """Tests for TokenBucket class."""

    def test_burst_then_limited_then_refill(self):
        """rate=5/s, burst=10: 10 pass, 11th limited, 5 more after one second."""
        clock = FakeClock()
        bucket = TokenBucket(rate=5, burst=10, clock=clock)

        for i in range(10):
            is_allowed, _ = bucket.try_acquire()
            assert is_allowed is True, f"Request {i+1} should succeed"

        is_allowed, retry_after = bucket.try_acquire()
        assert is_allowed is False
        assert retry_after == pytest.approx(0.2)

        clock.now += 1.0

        for _ in range(5):
            is_allowed, _ = bucket.try_acquire()
            assert is_allowed is True
        is_allowed, _ = bucket.try_acquire()
        assert is_allowed is False

    def test_refill_capped_at_burst(self):
        """Idle time never banks more than burst tokens."""
        clock = FakeClock()
        bucket = TokenBucket(rate=100, burst=3, clock=clock)

        clock.now += 3600
        assert bucket.available == 3

        results = [bucket.try_acquire()[0] for _ in range(4)]
        assert results == [True, True, True, False]

    def test_continuous_refill(self):
        """Tokens accrue fractionally rather than at window boundaries."""
        clock = FakeClock()
        bucket = TokenBucket(rate=2, burst=1, clock=clock)

        assert bucket.try_acquire()[0] is True
        clock.now += 0.25
        assert bucket.try_acquire()[0] is False
        clock.now += 0.25
        assert bucket.try_acquire()[0] is True

    def test_clock_going_backwards_does_not_add_tokens(self):
        clock = FakeClock()
        bucket = TokenBucket(rate=1, burst=1, clock=clock)

        assert bucket.try_acquire()[0] is True
        clock.now -= 10
        assert bucket.try_acquire()[0] is False

    def test_reset(self):
        bucket = TokenBucket(rate=1, burst=2, clock=FakeClock())

        bucket.try_acquire()
        bucket.try_acquire()
        assert bucket.try_acquire()[0] is False

        bucket.reset()
        assert bucket.available == 2

    def test_no_over_admission_across_threads(self):
        """Concurrent callers never get more than burst tokens in total."""
        bucket = TokenBucket(rate=0.001, burst=50)
        admitted = []
        lock = threading.Lock()

        def worker():
            for _ in range(20):
                is_allowed, _ = bucket.try_acquire()
                if is_allowed:
                    with lock:
                        admitted.append(1)

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(admitted) == 50

    @pytest.mark.parametrize("rate,burst", [(0, 10), (-1, 10), (5, 0)])
    def test_invalid_configuration(self, rate, burst):
        with pytest.raises(ValueError):
            TokenBucket(rate=rate, burst=burst)


class TestRateLimitMiddleware:
    """Tests for RateLimitMiddleware class."""

    @pytest.fixture
    def mock_settings(self):
        """Create mock settings."""
        settings = MagicMock()
        settings.RATE_LIMIT_ENABLED = True
        settings.RATE_LIMIT_PER_SECOND = 0.001
        settings.RATE_LIMIT_BURST_SIZE = 3
        return settings

    @pytest.fixture
    def app(self, mock_settings):
        """Create test FastAPI app with rate limit middleware."""
        app = FastAPI()

        @app.get("/key")
        async def key_endpoint():
            return {"success": True}

        @app.get("/health")
        async def health_endpoint():
            return {"status": "healthy"}

        return app

    def test_middleware_allows_request(self, app, mock_settings):
        """Middleware allows requests under limit."""
        with patch("kvdb.middleware.rate_limit.get_settings", return_value=mock_settings):
            app.add_middleware(RateLimitMiddleware)
            client = TestClient(app)

            response = client.get("/key")
            assert response.status_code == 200
            assert response.headers["X-RateLimit-Limit"] == "3"
            assert response.headers["X-RateLimit-Remaining"] == "2"

    def test_middleware_returns_429_when_exceeded(self, app, mock_settings):
        """Middleware returns 429 once the bucket is empty."""
        with patch("kvdb.middleware.rate_limit.get_settings", return_value=mock_settings):
            app.add_middleware(RateLimitMiddleware)
            client = TestClient(app)

            for i in range(3):
                response = client.get("/key")
                assert response.status_code == 200, f"Request {i+1} should succeed"

            response = client.get("/key")
            assert response.status_code == 429
            body = response.json()
            assert body["error"]["code"] == "rate_limit_exceeded"
            assert body["success"] is False
            assert "Retry-After" in response.headers

    def test_limit_is_global_across_clients(self, app, mock_settings):
        """All callers share one bucket."""
        with patch("kvdb.middleware.rate_limit.get_settings", return_value=mock_settings):
            app.add_middleware(RateLimitMiddleware)
            client = TestClient(app)

            for ip in ["10.0.0.1", "10.0.0.2", "10.0.0.3"]:
                response = client.get("/key", headers={"X-Forwarded-For": ip})
                assert response.status_code == 200

            response = client.get("/key", headers={"X-Forwarded-For": "10.0.0.4"})
            assert response.status_code == 429

    def test_rejected_request_never_reaches_handler(self, mock_settings):
        calls = []
        app = FastAPI()

        @app.get("/key")
        async def key_endpoint():
            calls.append(1)
            return {"success": True}

        limiter = TokenBucket(rate=0.001, burst=1)
        with patch("kvdb.middleware.rate_limit.get_settings", return_value=mock_settings):
            app.add_middleware(RateLimitMiddleware, limiter=limiter)
            client = TestClient(app)

            assert client.get("/key").status_code == 200
            assert client.get("/key").status_code == 429

        assert calls == [1]

    def test_middleware_excluded_paths(self, app, mock_settings):
        """Health endpoint is excluded from rate limiting."""
        with patch("kvdb.middleware.rate_limit.get_settings", return_value=mock_settings):
            app.add_middleware(RateLimitMiddleware)
            client = TestClient(app)

            for _ in range(10):
                response = client.get("/health")
                assert response.status_code == 200

            assert client.get("/key").status_code == 200

    def test_middleware_disabled(self, app, mock_settings):
        """Middleware can be disabled via config."""
        mock_settings.RATE_LIMIT_ENABLED = False

        with patch("kvdb.middleware.rate_limit.get_settings", return_value=mock_settings):
            app.add_middleware(RateLimitMiddleware)
            client = TestClient(app)

            for _ in range(10):
                response = client.get("/key")
                assert response.status_code == 200
