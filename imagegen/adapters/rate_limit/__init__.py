"""Rate limiting adapters.

This package keeps the admission tracker behind a small abstraction so the
HTTP layer never reaches into the per-client state directly.
"""

from imagegen.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from imagegen.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemorySlidingWindowRateLimiter",
    "RateLimitResult",
]
