"""Dialectic middleware — rate limiting."""
from .rate_limiter import RateLimiter, TokenBucket

__all__ = ["RateLimiter", "TokenBucket"]
