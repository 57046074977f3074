from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock


class MinIntervalGate:
    """Per-key minimum interval between accepted events.

    Keys idle for ``evict_after_intervals`` intervals are dropped, and at most
    ``max_keys`` keys are tracked (oldest first out).
    """

    def __init__(
        self,
        *,
        min_interval_seconds: float,
        evict_after_intervals: int = 5,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._min_interval = min_interval_seconds
        self._horizon = min_interval_seconds * evict_after_intervals
        self._max_keys = max_keys
        self._clock = clock
        self._last_sent: OrderedDict[str, float] = OrderedDict()
        self._lock = Lock()

    def try_acquire(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            self._evict(now)
            last = self._last_sent.get(key)
            if last is not None and now - last < self._min_interval:
                return False
            self._last_sent[key] = now
            self._last_sent.move_to_end(key)
            while len(self._last_sent) > self._max_keys:
                self._last_sent.popitem(last=False)
            return True

    def _evict(self, now: float) -> None:
        while self._last_sent:
            key, sent_at = next(iter(self._last_sent.items()))
            if now - sent_at <= self._horizon:
                break
            self._last_sent.pop(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_sent)
