"""In-memory sliding-window rate limiter (admission tracker).

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: a map lock guards record lookup/creation and each record has
  its own lock for the prune + append sequence.
- Records are never evicted; memory grows with the number of distinct
  identifiers observed.
"""

from __future__ import annotations

import bisect
import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from imagegen.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class _ClientRecord:
    timestamps: list[float] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting admitted actions per key over a trailing window.

    Each key keeps the instants of its admitted actions. On every access the
    instants older than the window are dropped, so quota recovers continuously
    as individual entries age out rather than in batch resets.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory admission tracker.

        Args:
            limit: Maximum number of admitted actions per trailing window.
            window_seconds: Length of the trailing window in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._records_lock = threading.Lock()
        self._records: dict[str, _ClientRecord] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def _get_or_create_record(self, identifier: str) -> _ClientRecord:
        with self._records_lock:
            record = self._records.get(identifier)
            if record is None:
                record = _ClientRecord()
                self._records[identifier] = record
            return record

    def _prune(self, timestamps: list[float], now: float) -> list[float]:
        """Drop instants at least one full window old (``now - t >= window``)."""
        return [t for t in timestamps if now - t < self._window_seconds]

    def _reset_at(self, timestamps: list[float]) -> int | None:
        if not timestamps:
            return None
        return int(math.ceil(timestamps[0] + self._window_seconds))

    def _build_allowed_result(self, *, timestamps: list[float]) -> RateLimitResult:
        return RateLimitResult(
            limited=False,
            limit=self._limit,
            remaining=max(0, self._limit - len(timestamps)),
            reset_at=self._reset_at(timestamps),
            retry_after_seconds=None,
        )

    def _build_blocked_result(self, *, now: float, timestamps: list[float]) -> RateLimitResult:
        # The entry whose expiry frees one slot.
        freeing = timestamps[len(timestamps) - self._limit]
        retry_after = max(0, int(math.ceil(freeing + self._window_seconds - now)))
        return RateLimitResult(
            limited=True,
            limit=self._limit,
            remaining=0,
            reset_at=self._reset_at(timestamps),
            retry_after_seconds=retry_after,
        )

    def check_and_record(self, identifier: str, now: float | None = None) -> RateLimitResult:
        """Admit or reject one action for ``identifier``.

        Prunes expired instants, then records ``now`` only when the pruned
        count is below the limit. A rejected action consumes no quota.

        Args:
            identifier: Opaque client key; used only as a map key.
            now: Current instant in UNIX seconds. Read from the clock under the
                record lock when omitted.

        Returns:
            RateLimitResult with the decision and remaining quota.

        Raises:
            ValueError: If identifier is empty.
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

        record = self._get_or_create_record(identifier)

        with record.lock:
            if now is None:
                now = self._clock()

            timestamps = self._prune(record.timestamps, now)
            record.timestamps = timestamps

            if len(timestamps) >= self._limit:
                return self._build_blocked_result(now=now, timestamps=timestamps)

            # Keeps order when a caller-supplied instant arrives late.
            bisect.insort(timestamps, now)
            return self._build_allowed_result(timestamps=timestamps)

    def peek(self, identifier: str, now: float | None = None) -> RateLimitResult:
        """Report the quota ``check_and_record`` would see, without mutating state.

        Unseen identifiers are not registered.
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

        with self._records_lock:
            record = self._records.get(identifier)

        if now is None:
            now = self._clock()

        if record is None:
            return self._build_allowed_result(timestamps=[])

        with record.lock:
            timestamps = self._prune(record.timestamps, now)

        if len(timestamps) >= self._limit:
            return self._build_blocked_result(now=now, timestamps=timestamps)
        return self._build_allowed_result(timestamps=timestamps)

    def tracked_identifiers(self) -> int:
        """Number of identifiers with a record (including empty ones)."""
        with self._records_lock:
            return len(self._records)
