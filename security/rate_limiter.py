"""
security/rate_limiter.py
-------------------------
Rate limiting to prevent API abuse.
Limits the number of requests a client can make within a time window.
"""

import threading
import time
from functools import wraps
from typing import Callable

from flask import request, session

from utils.errors import RateLimitError
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Sliding-window counter per client key, kept in memory.

    Args:
        max_requests: Requests allowed per window.
        window_seconds: Window length.
        clock: Returns seconds; injectable for tests.
    """

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.time):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._timestamps: dict[str, list[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def _cleanup(self, key: str, now: float) -> list[float]:
        """Remove expired timestamps for a key, dropping the key once empty."""
        cutoff = now - self.window_seconds
        recent = [t for t in self._timestamps.get(key, ()) if t > cutoff]
        if recent:
            self._timestamps[key] = recent
        else:
            self._timestamps.pop(key, None)
        return recent

    def _sweep(self, now: float) -> None:
        """Drop every key whose requests have all left the window. Runs at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key in list(self._timestamps):
            self._cleanup(key, now)

    def hit(self, key: str) -> bool:
        """Record a request. Returns False if the key is over its limit."""
        now = self.clock()
        with self._lock:
            self._sweep(now)
            recent = self._cleanup(key, now)
            if len(recent) >= self.max_requests:
                return False
            recent.append(now)
            self._timestamps[key] = recent
            return True


def _client_key() -> str:
    user_id = session.get("user_id")
    if user_id is not None:
        return f"user:{user_id}"
    return f"ip:{request.remote_addr}"


def rate_limited(func: Callable):
    """
    Decorator that enforces rate limiting per client.

    Configuration (via .env):
        RATE_LIMIT_REQUESTS: Max requests per window (default: 60).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).

    Behavior:
        - Logged-in clients are tracked by user id, others by remote address.
        - If exceeded, raises RateLimitError (HTTP 429).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        from handlers.deps import get_services

        key = _client_key()
        if not get_services().rate_limiter.hit(key):
            logger.warning(f"Rate limit hit for {key}")
            raise RateLimitError("Too many requests. Please slow down and try again.")
        return func(*args, **kwargs)

    return wrapper
