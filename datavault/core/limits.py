import time
from typing import Hashable

from cachetools import TTLCache


class SimpleRateLimiter:
    """Sliding-window limiter keeping recent hit times per key in memory.

    Buckets live in a TTLCache so idle keys expire after one window.
    """

    def __init__(self, limit: int, window_seconds: int, maxsize: int = 4096):
        self.limit = limit
        self.window = window_seconds
        self.bucket: TTLCache = TTLCache(maxsize=maxsize, ttl=window_seconds)

    def allow(self, key: Hashable) -> bool:
        now = time.time()
        q = [t for t in self.bucket.get(key, []) if now - t < self.window]
        if len(q) >= self.limit:
            self.bucket[key] = q
            return False
        q.append(now)
        self.bucket[key] = q
        return True

    def clear(self):
        self.bucket.clear()


def login_key(host: str | None, email: str) -> tuple[str, str]:
    return (host or "anon", (email or "").lower())
