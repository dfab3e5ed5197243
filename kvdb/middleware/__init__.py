"""
Middleware Package

Contains application middleware components.
"""

from kvdb.middleware.rate_limit import RateLimitMiddleware, TokenBucket

__all__ = ["RateLimitMiddleware", "TokenBucket"]
