"""
Rate limiter for the analytics write endpoints.

Sliding-window request counting per client address. It gates traffic in
front of the recorder; the recorder itself never throttles.
"""

import logging
import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Dict, Optional

from flask import request

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many analytics requests."


def get_client_ip() -> str:
    """Get client IP address.

    Forwarded headers are applied by ProxyFix for the trusted proxy hop only,
    so ``remote_addr`` is never a value the client chose.
    """
    return request.remote_addr or "unknown"


class RateLimiter:
    """
    Allows at most ``max_requests`` per ``window_seconds`` for each key.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock or time.monotonic
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = self.clock()
        self._lock = Lock()

    def _sweep(self, cutoff: float) -> None:
        # Drop clients with no hit inside the window
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[key]

    def allow(self, key: str) -> bool:
        """Record a request for ``key`` and report whether it is within the limit."""
        now = self.clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.max_requests:
                logger.warning(f"Rate limit exceeded for {key}: {len(hits)}/{self.max_requests}")
                return False
            hits.append(now)
            return True
