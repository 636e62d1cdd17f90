"""Vote rate limiting.

Only vote submissions are throttled. The default limiter keeps its counters
in process memory and is correct only for a single instance; deployments
running several instances point RATE_LIMIT_STORAGE_URI at a shared store
(Redis) and get a ``StorageRateLimiter`` instead.
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from limits import RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

from globalpoll.core import constants
from globalpoll.core.config import settings
from globalpoll.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: int = 0


@dataclass
class _Window:
    count: int
    window_start: float


class RateLimiter:
    """Interface for per-key request admission."""

    def admit(self, key: str) -> RateLimitDecision:
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError


class InMemoryRateLimiter(RateLimiter):
    """
    Per-key counter over a window that starts at the key's first request.

    Once the window has elapsed the next request starts a fresh window with
    a count of 1. When more than ``cleanup_threshold`` keys are tracked,
    keys whose window started more than ``stale_after_seconds`` ago are
    dropped.
    """

    def __init__(
        self,
        max_requests: int = constants.RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = constants.RATE_LIMIT_WINDOW_SECONDS,
        cleanup_threshold: int = constants.RATE_LIMIT_CLEANUP_THRESHOLD,
        stale_after_seconds: int = constants.RATE_LIMIT_STALE_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_threshold = cleanup_threshold
        self.stale_after_seconds = stale_after_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def admit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now - window.window_start > self.window_seconds:
                self._windows[key] = _Window(count=1, window_start=now)
                decision = RateLimitDecision(allowed=True)
            else:
                window.count += 1
                if window.count > self.max_requests:
                    decision = RateLimitDecision(allowed=False, retry_after=self.window_seconds)
                else:
                    decision = RateLimitDecision(allowed=True)

            if len(self._windows) > self.cleanup_threshold:
                self._evict_stale(now)

        return decision

    def _evict_stale(self, now: float) -> None:
        cutoff = now - self.stale_after_seconds
        stale = [k for k, w in self._windows.items() if w.window_start < cutoff]
        for k in stale:
            del self._windows[k]
        if stale:
            logger.debug("rate_limit_entries_evicted", count=len(stale))

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)


class StorageRateLimiter(RateLimiter):
    """Fixed-window limiter backed by a ``limits`` storage (memory://, redis://)."""

    NAMESPACE = "votes"

    def __init__(
        self,
        storage_uri: str,
        max_requests: int = constants.RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = constants.RATE_LIMIT_WINDOW_SECONDS,
    ):
        self._storage = storage_from_string(storage_uri)
        self._strategy = FixedWindowRateLimiter(self._storage)
        self._item = RateLimitItemPerSecond(max_requests, window_seconds)

    def admit(self, key: str) -> RateLimitDecision:
        if self._strategy.hit(self._item, self.NAMESPACE, key):
            return RateLimitDecision(allowed=True)

        reset_time, _ = self._strategy.get_window_stats(self._item, self.NAMESPACE, key)
        retry_after = max(1, int(round(reset_time - time.time())))
        return RateLimitDecision(allowed=False, retry_after=retry_after)

    def reset(self) -> None:
        self._storage.reset()


def build_rate_limiter(
    storage_uri: Optional[str] = None,
    max_requests: int = constants.RATE_LIMIT_MAX_REQUESTS,
    window_seconds: int = constants.RATE_LIMIT_WINDOW_SECONDS,
) -> RateLimiter:
    """Pick the shared-store limiter when a storage URI is configured."""
    if storage_uri:
        return StorageRateLimiter(storage_uri, max_requests, window_seconds)
    return InMemoryRateLimiter(max_requests=max_requests, window_seconds=window_seconds)


# Process-wide limiter for vote submissions
vote_limiter = build_rate_limiter(
    settings.RATE_LIMIT_STORAGE_URI,
    settings.RATE_LIMIT_MAX_REQUESTS,
    settings.RATE_LIMIT_WINDOW_SECONDS,
)
