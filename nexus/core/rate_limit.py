from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Dict


@dataclass
class Bucket:
    tokens: float
    last_ts: float


class InMemoryRateLimiter:
    """
    Token bucket per client key.

    ``capacity`` requests may burst; the bucket then refills at
    ``refill_per_sec``. State lives in this process only, so a deployment
    with several workers gets one budget per worker.
    """

    def __init__(self, capacity: int, refill_per_sec: float):
        self.capacity = float(capacity)
        self.refill_per_sec = float(refill_per_sec)
        self._buckets: Dict[str, Bucket] = {}
        self._lock = threading.Lock()

    @classmethod
    def per_window(cls, requests: int, window_seconds: int) -> "InMemoryRateLimiter":
        return cls(capacity=requests, refill_per_sec=requests / float(window_seconds))

    def _bucket(self, key: str, now: float) -> Bucket:
        b = self._buckets.get(key)
        if b is None:
            b = self._buckets[key] = Bucket(tokens=self.capacity, last_ts=now)
            return b
        elapsed = max(0.0, now - b.last_ts)
        b.tokens = min(self.capacity, b.tokens + elapsed * self.refill_per_sec)
        b.last_ts = now
        return b

    def allow(self, key: str, cost: float = 1.0) -> bool:
        with self._lock:
            b = self._bucket(key, time.time())
            if b.tokens < cost:
                return False
            b.tokens -= cost
            return True

    def retry_after_seconds(self, key: str, cost: float = 1.0) -> int:
        """Whole seconds until ``key`` can spend ``cost`` again."""
        with self._lock:
            b = self._bucket(key, time.time())
            missing = cost - b.tokens
        if missing <= 0:
            return 0
        if self.refill_per_sec <= 0:
            return 0
        return max(1, math.ceil(missing / self.refill_per_sec))
