"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
in-memory admission tracker stays behind a single entry point.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of an admission decision.

    Attributes:
        limited: True when the action was rejected.
        limit: Max admitted actions per trailing window.
        remaining: Further actions permitted in the current window (0 when limited).
        reset_at: UNIX epoch seconds when the oldest recorded action leaves the
            window, or None when nothing is recorded.
        retry_after_seconds: Suggested wait time in seconds when limited.
    """

    limited: bool
    limit: int
    remaining: int
    reset_at: int | None = None
    retry_after_seconds: int | None = None

    @property
    def allowed(self) -> bool:
        return not self.limited


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check_and_record(self, identifier: str, now: float | None = None) -> RateLimitResult:
        """Decide whether a new action is permitted and record it if so.

        Args:
            identifier: Opaque client key (e.g., forwarded IP address).
            now: Current instant in UNIX seconds; the limiter clock when omitted.

        Returns:
            RateLimitResult describing the admission decision.
        """
        raise NotImplementedError

    @abstractmethod
    def peek(self, identifier: str, now: float | None = None) -> RateLimitResult:
        """Report the current quota for an identifier without recording anything."""
        raise NotImplementedError
