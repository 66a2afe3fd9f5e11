"""Rate limiting dependency for FastAPI routes.

This module wires the admission tracker into the HTTP layer. It owns the
process-wide tracker instance; nothing else reaches into its state.

Rate limiting strategy:
- Sliding window per client (default 3 generations per 24 hours).
- The client is identified by a forwarded-address header, falling back to the
  sentinel "unknown" when absent. The header is client-controlled and may be
  forged; identifiers are neither authenticated nor assumed unique.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from imagegen.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from imagegen.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from imagegen.core.config import settings
from imagegen.core.logging import hash_identifier

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide admission tracker.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the tracker is rebuilt.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = InMemorySlidingWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
        )
        _limiter_config = config

    return _limiter


def resolve_client_identifier(request: Request) -> str:
    """Derive the opaque client identifier for the current request.

    The configured header value is used verbatim (after trimming whitespace).
    """

    value = request.headers.get(settings.app.client_identifier_header)
    if value and value.strip():
        return value.strip()
    return UNKNOWN_CLIENT


def _format_window(window_seconds: int) -> str:
    if window_seconds % 3600 == 0:
        hours = window_seconds // 3600
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    if window_seconds % 60 == 0:
        minutes = window_seconds // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{window_seconds} seconds"


def limit_exceeded_message() -> str:
    """User-facing rejection text rendered from the configured quota."""
    return (
        "You have reached the maximum number of image generations "
        f"({settings.app.rate_limit_requests} per "
        f"{_format_window(settings.app.rate_limit_window_seconds)}). "
        "Please try again later."
    )


def _rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
    }
    if result.reset_at is not None:
        headers["X-RateLimit-Reset"] = str(result.reset_at)
    if result.retry_after_seconds is not None:
        headers["Retry-After"] = str(result.retry_after_seconds)
    return headers


async def enforce_rate_limit(request: Request) -> RateLimitResult | None:
    """FastAPI dependency admitting or rejecting one generation.

    When enabled, records one action for the requesting client. A rejected
    request consumes no quota.

    Args:
        request: FastAPI request.

    Returns:
        The admission result, or None when rate limiting is disabled.

    Raises:
        HTTPException: 429 Too Many Requests when the client is over its quota.
    """

    if not settings.app.rate_limit_enabled:
        return None

    limiter = get_rate_limiter()
    identifier = resolve_client_identifier(request)
    log_fields = {
        "client_hash": hash_identifier(identifier),
        "client_known": identifier != UNKNOWN_CLIENT,
        "window_s": settings.app.rate_limit_window_seconds,
    }

    result = limiter.check_and_record(identifier)
    if not result.limited:
        logger.info(
            "rate_limit.allowed",
            extra={**log_fields, "limit": result.limit, "remaining": result.remaining},
        )
        return result

    logger.warning(
        "rate_limit.exceeded",
        extra={
            **log_fields,
            "limit": result.limit,
            "remaining": result.remaining,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    headers = _rate_limit_headers(result) if settings.app.rate_limit_include_headers else None

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=limit_exceeded_message(),
        headers=headers,
    )


async def current_quota(request: Request) -> RateLimitResult:
    """FastAPI dependency reporting the client's quota without consuming it."""

    limiter = get_rate_limiter()
    return limiter.peek(resolve_client_identifier(request))
