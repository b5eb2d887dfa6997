"""In-memory fixed-window request throttling.

Single-process only; each process keeps its own counters.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

PRUNE_THRESHOLD = 10_000


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: float


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def check(self, identifier: str) -> RateLimitDecision:
        """Count one request for ``identifier`` and report whether it may proceed."""
        now = self._clock()
        if len(self._windows) > PRUNE_THRESHOLD:
            self._prune(now)

        window = self._windows.get(identifier)
        if window is None or window.reset_at <= now:
            window = _Window(count=1, reset_at=now + self.window_seconds)
            self._windows[identifier] = window
            return RateLimitDecision(True, self.max_requests - 1, window.reset_at)

        if window.count >= self.max_requests:
            return RateLimitDecision(False, 0, window.reset_at)

        window.count += 1
        return RateLimitDecision(True, self.max_requests - window.count, window.reset_at)

    def _prune(self, now: float) -> None:
        expired = [key for key, w in self._windows.items() if w.reset_at <= now]
        for key in expired:
            del self._windows[key]

    def __len__(self) -> int:
        return len(self._windows)
