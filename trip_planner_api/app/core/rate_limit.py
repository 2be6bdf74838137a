"""
Per‑client request budgets.

``RateLimiter`` implements a fixed‑window counter keyed by client
address: each key may issue ``max_requests`` requests per window, and
the window restarts on the first request after it has elapsed.  Two
limiters are created per application (see ``main.create_app``): a
global one for every API route and a tighter one for register/login.
The FastAPI dependencies below look them up on ``app.state``.
"""

import logging
import math
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import Request

from .errors import RateLimitError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed‑window request counter."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        message: str = "Too many requests from this IP, please try again later.",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (window start, requests seen in window)
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, key: str) -> int:
        """Record one request for ``key`` and return the remaining budget.

        Raises ``RateLimitError`` when the budget for the current window
        is already used up.
        """
        now = self._clock()
        with self._lock:
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self.window_seconds:
                start, count = now, 0
            if count >= self.max_requests:
                retry_after = math.ceil(self.window_seconds - (now - start))
                logger.warning("Rate limit exceeded for %s", key)
                raise RateLimitError(self.message, retry_after=max(retry_after, 1))
            self._windows[key] = (start, count + 1)
            self._prune(now)
            return self.max_requests - count - 1

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        # Drop expired windows so the table does not grow with every client seen.
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def enforce_global_limit(request: Request) -> None:
    request.app.state.global_limiter.hit(client_address(request))


async def enforce_auth_limit(request: Request) -> None:
    request.app.state.auth_limiter.hit(client_address(request))
