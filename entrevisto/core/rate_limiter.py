import math
import threading
import time
from collections import deque

from entrevisto.config import settings


class InMemoryRateLimiter:
    """
    Sliding-window request log per key, kept in process memory.

    Each key holds the monotonic timestamps of its accepted requests inside the
    current window, so a burst at the end of one minute cannot be followed by a
    full second burst at the start of the next. State is per process; running
    several workers multiplies the effective budget.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: dict[str, deque[float]] = {}

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """Record a hit for key if it fits the budget. Returns (allowed, retry_after_seconds)."""
        now = self._clock()
        cutoff = now - window_seconds
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= limit:
                # the oldest hit leaving the window frees the next slot
                return False, max(1, math.ceil(hits[0] - cutoff))
            hits.append(now)
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def limit_for_path(method: str, path: str) -> int | None:
    """Per-minute budget for endpoints that cost money or storage; None means unlimited."""
    if method != "POST":
        return None
    if path == "/resumes/upload":
        return settings.rate_limit_upload_per_min
    if path in {"/interviews/start", "/interviews/assistant"}:
        return settings.rate_limit_interview_start_per_min
    return None


rate_limiter = InMemoryRateLimiter()
