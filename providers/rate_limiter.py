"""Sliding-window rate limiter for LLM calls during a discovery session."""

import math
import time
from typing import Callable, Dict, List, Optional

from config import settings
from .errors import ProviderError


class RateLimiter:
    """Caps requests per rolling window and per session.

    The clock is injectable so tests can move time without sleeping.
    """

    def __init__(
        self,
        max_requests: Optional[int] = None,
        window_seconds: float = 60.0,
        session_limit: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests or settings.rate_limit_per_minute
        self.window_seconds = window_seconds
        self.session_limit = session_limit or settings.session_request_limit
        self._clock = clock
        self._requests: List[float] = []
        self._session_count = 0
        self._session_start = clock()

    def _prune(self, now: float) -> None:
        self._requests = [t for t in self._requests if now - t < self.window_seconds]

    def can_make_request(self) -> bool:
        """Check both limits without recording a request."""
        now = self._clock()
        self._prune(now)
        if self._session_count >= self.session_limit:
            return False
        return len(self._requests) < self.max_requests

    def acquire(self) -> None:
        """Record a request or raise ProviderError(RATE_LIMITED)."""
        now = self._clock()
        self._prune(now)

        if self._session_count >= self.session_limit:
            raise ProviderError(
                f"Session limit of {self.session_limit} requests reached",
                code=ProviderError.RATE_LIMITED,
                retryable=False,
            )

        if len(self._requests) >= self.max_requests:
            wait = self.wait_time()
            raise ProviderError(
                f"Rate limit exceeded. Try again in {math.ceil(wait)} seconds.",
                code=ProviderError.RATE_LIMITED,
                retryable=True,
            )

        self._requests.append(now)
        self._session_count += 1

    def wait_time(self) -> float:
        """Seconds until the oldest request leaves the window."""
        if not self._requests:
            return 0.0
        oldest = min(self._requests)
        return max(0.0, self.window_seconds - (self._clock() - oldest))

    def stats(self) -> Dict[str, float]:
        return {
            "count": self._session_count,
            "session_minutes": round((self._clock() - self._session_start) / 60),
        }

    def reset(self) -> None:
        self._requests = []
        self._session_count = 0
        self._session_start = self._clock()


# Shared limiter for the current process
_current_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get the shared rate limiter, creating one if needed."""
    global _current_limiter
    if _current_limiter is None:
        _current_limiter = RateLimiter()
    return _current_limiter


def reset_rate_limiter(**kwargs) -> RateLimiter:
    """Replace the shared rate limiter (e.g. at the start of a new session)."""
    global _current_limiter
    _current_limiter = RateLimiter(**kwargs)
    return _current_limiter
