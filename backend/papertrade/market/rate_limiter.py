"""Thread-safe sliding-window rate limiter."""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable
from threading import Lock

from ..errors import RateLimitExceeded, ValidationError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Per-resource sliding-window call accounting.

    Each resource name ("polymarket", "news", ...) keeps its own deque of call
    timestamps. On every check, timestamps that have left the trailing window
    are dropped before counting, so the window slides continuously rather than
    resetting on bucket boundaries.

    Check-and-record happens under a single lock: concurrent callers can never
    push a resource past ``max_calls`` within one window.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._calls: dict[str, deque[float]] = {}
        self._lock = Lock()

    def check_limit(self, resource: str, max_calls: int, window_ms: float) -> None:
        """Record a call to ``resource`` or raise RateLimitExceeded.

        Raises before recording anything, so a rejected call never consumes
        capacity.
        """
        if max_calls < 1:
            raise ValidationError(f"max_calls must be >= 1, got {max_calls}")
        if window_ms <= 0:
            raise ValidationError(f"window_ms must be > 0, got {window_ms}")

        window = window_ms / 1000.0
        with self._lock:
            now = self._clock()
            calls = self._calls.setdefault(resource, deque())
            while calls and now - calls[0] >= window:
                calls.popleft()

            if len(calls) >= max_calls:
                logger.warning("Rate limit hit for %s (%d calls in %.0fms)", resource, len(calls), window_ms)
                raise RateLimitExceeded(resource)

            calls.append(now)

    def recorded_calls(self, resource: str) -> int:
        """Number of timestamps currently held for a resource (not pruned)."""
        with self._lock:
            return len(self._calls.get(resource, ()))

    def reset(self, resource: str | None = None) -> None:
        """Forget recorded calls for one resource, or for all of them."""
        with self._lock:
            if resource is None:
                self._calls.clear()
            else:
                self._calls.pop(resource, None)
