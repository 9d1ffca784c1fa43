"""Per-item retry delays: exponential at first, then slow with jitter."""

from __future__ import annotations

import random
import threading
from typing import Dict, Hashable

# Largest delay representable as a signed 64-bit count of nanoseconds, in seconds.
_MAX_DELAY = (2**63 - 1) / 1e9


class ItemExponentialFailureAndJitterSlowRateLimiter:
    """Rate limiter whose delays are given and returned in seconds.

    The first ``max_fast_attempts`` failures of an item back off exponentially
    from ``fast_base_delay`` up to ``fast_max_delay``; later failures wait
    ``slow_base_delay`` plus a random jitter of up to
    ``slow_max_factor * slow_base_delay``.
    """

    def __init__(
        self,
        fast_base_delay: float,
        fast_max_delay: float,
        slow_base_delay: float,
        slow_max_factor: float,
        max_fast_attempts: int,
    ) -> None:
        if slow_max_factor <= 0.0:
            slow_max_factor = 1.0
        self._lock = threading.Lock()
        self._failures: Dict[Hashable, int] = {}
        self._max_fast_attempts = max_fast_attempts
        self._fast_base_delay = fast_base_delay
        self._fast_max_delay = fast_max_delay
        self._slow_base_delay = slow_base_delay
        self._slow_max_factor = slow_max_factor

    def when(self, item: Hashable) -> float:
        """Record a failure of ``item`` and return how long to wait before retrying."""
        with self._lock:
            fast_exp = self._failures.get(item, 0)
            num = fast_exp + 1
            self._failures[item] = num

        if num > self._max_fast_attempts:
            jitter = random.random() * self._slow_max_factor * self._slow_base_delay
            return self._slow_base_delay + jitter

        try:
            backoff = self._fast_base_delay * 2.0**fast_exp
        except OverflowError:
            return self._fast_max_delay
        if backoff > _MAX_DELAY:
            return self._fast_max_delay
        return min(backoff, self._fast_max_delay)

    def num_requeues(self, item: Hashable) -> int:
        with self._lock:
            return self._failures.get(item, 0)

    def forget(self, item: Hashable) -> None:
        with self._lock:
            self._failures.pop(item, None)