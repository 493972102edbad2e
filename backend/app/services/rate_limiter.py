"""
Sliding-window request limiter keyed by client address.
"""

import logging
import threading
import time
from collections import deque
from typing import Deque, Dict


logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most `max_requests` per `window_seconds` for each key."""

    def __init__(self, max_requests: int = 100, window_seconds: float = 900):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = time.monotonic()

    def allow(self, key: str) -> bool:
        """Record a request for key; False if the key is over its limit."""
        now = time.monotonic()
        with self._lock:
            self._evict_idle(now)
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()

            if len(hits) >= self.max_requests:
                logger.warning(f"Rate limit exceeded for {key}")
                return False

            hits.append(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._hits)

    def _evict_idle(self, now: float) -> None:
        """Forget keys whose latest request left the window. Runs at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        idle = [key for key, hits in self._hits.items() if not hits or now - hits[-1] >= self.window_seconds]
        for key in idle:
            del self._hits[key]
        if idle:
            logger.debug(f"Dropped {len(idle)} idle rate-limit keys")
