"""Sliding-window pacing for tutor chat requests.

Responsibilities:
- Cap how many chat requests one key (provider and model) may send within a
  rolling time window, so rapid typing or retries cannot flood the provider.
- Keep pacing independent from the HTTP client; the clock and sleeper are
  injectable for tests.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from time import monotonic, sleep
from typing import Callable


@dataclass(slots=True)
class RateLimiter:
    """Allow at most `max_requests` per key in any `window_seconds` span.

    A non-positive `max_requests` or `window_seconds` disables pacing.
    """

    max_requests: int = 20
    window_seconds: float = 60.0
    clock: Callable[[], float] = monotonic
    sleeper: Callable[[float], None] = sleep
    _sent_at: dict[str, deque[float]] = field(default_factory=dict)

    def acquire(self, key: str) -> None:
        """Wait, if needed, until `key` has a free slot, then claim it."""

        if self.max_requests <= 0 or self.window_seconds <= 0.0:
            return
        history = self._sent_at.setdefault(key, deque())
        now = self.clock()
        self._expire(history, now)
        if len(history) >= self.max_requests:
            self.sleeper(history[0] + self.window_seconds - now)
            now = self.clock()
            self._expire(history, now)
        history.append(now)

    def _expire(self, history: deque[float], now: float) -> None:
        while history and history[0] + self.window_seconds <= now:
            history.popleft()
