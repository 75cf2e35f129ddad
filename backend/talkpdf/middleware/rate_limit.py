"""
Rate Limiting - Protect the processing pipeline from abuse.

Two layers:
- slowapi limiter keyed by client IP, applied by the API gateway
- SlidingWindowRateLimiter keyed by (user, action), used at processing
  admission so each user gets a bounded number of pipeline runs per window

The sliding window is in-process and best-effort: a restart resets it.
"""
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional, Tuple

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..core.config import RATE_LIMIT_ENABLED, RATE_LIMIT_PER_MINUTE
from ..core.logging_config import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key for request.

    Uses the bearer token when present so users behind one NAT do not
    share a budget, otherwise the client IP.
    """
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer ") and len(auth_header) > 7:
        return f"token:{auth_header[7:][-16:]}"
    return get_remote_address(request)


# Gateway limiter (per client)
limiter = Limiter(
    key_func=get_rate_limit_key,
    enabled=RATE_LIMIT_ENABLED,
    default_limits=[f"{RATE_LIMIT_PER_MINUTE}/minute"]
)


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of an admission check."""
    allowed: bool
    reset_in_ms: int
    remaining: int


class SlidingWindowRateLimiter:
    """
    Per-(user, action) sliding window of admitted request timestamps.

    A call is admitted while fewer than max_requests timestamps fall inside
    the trailing window. Rejections report how long until the oldest
    timestamp leaves the window. Safe for concurrent use.
    """

    def __init__(
        self,
        clock: Callable[[], int] = _monotonic_ms,
        cleanup_interval_ms: int = 5 * 60 * 1000
    ):
        """
        Args:
            clock: Millisecond clock (injectable for tests)
            cleanup_interval_ms: How often expired windows are evicted
        """
        self._clock = clock
        self._cleanup_interval_ms = cleanup_interval_ms
        self._windows: Dict[Tuple[str, str], Deque[int]] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()
        self._longest_window_ms = 0

    def allow(
        self,
        user_id: str,
        action_key: str,
        window_ms: int,
        max_requests: int
    ) -> RateLimitDecision:
        """
        Check and record one request.

        Args:
            user_id: Caller identity
            action_key: Name of the limited action (e.g. "process-pdf")
            window_ms: Window length in milliseconds
            max_requests: Requests admitted per window

        Returns:
            RateLimitDecision with allowed flag, reset time and remaining budget
        """
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")

        now = self._clock()
        key = (user_id, action_key)

        with self._lock:
            self._longest_window_ms = max(self._longest_window_ms, window_ms)
            if now - self._last_cleanup >= self._cleanup_interval_ms:
                self._evict_expired(now)

            timestamps = self._windows.setdefault(key, deque())
            window_start = now - window_ms
            while timestamps and timestamps[0] <= window_start:
                timestamps.popleft()

            if len(timestamps) >= max_requests:
                reset_in_ms = max(1, timestamps[0] + window_ms - now)
                logger.info(
                    f"Rate limit hit for user {user_id} on '{action_key}' "
                    f"({len(timestamps)}/{max_requests}, reset in {reset_in_ms}ms)"
                )
                return RateLimitDecision(allowed=False, reset_in_ms=reset_in_ms, remaining=0)

            timestamps.append(now)
            return RateLimitDecision(
                allowed=True,
                reset_in_ms=0,
                remaining=max_requests - len(timestamps)
            )

    def _evict_expired(self, now: int) -> None:
        """Drop windows whose newest timestamp is older than any window in use. Caller holds the lock."""
        cutoff = now - self._longest_window_ms
        expired = [key for key, stamps in self._windows.items() if not stamps or stamps[-1] <= cutoff]
        for key in expired:
            del self._windows[key]
        self._last_cleanup = now
        if expired:
            logger.debug(f"Rate limiter evicted {len(expired)} expired windows")

    def reset(self, user_id: Optional[str] = None) -> None:
        """Forget recorded requests (all users, or one user)."""
        with self._lock:
            if user_id is None:
                self._windows.clear()
            else:
                for key in [k for k in self._windows if k[0] == user_id]:
                    del self._windows[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
