"""
In-memory read cache for the public poll endpoints.

The active poll, the embed payload and the history list are read far more
often than they change, so their serialized payloads are kept for a short
TTL and dropped explicitly whenever a vote, an admin action or the expiry
sweep changes what they would show.

Storage is an OrderedDict bounded by ``max_size`` with LRU eviction, guarded
by a reentrant lock because FastAPI runs sync endpoints in a thread pool.
Misses are fetched under a per-key lock so a slow query only holds back
readers of the same key.
"""

import threading
import time
from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Tuple

from globalpoll.core.constants import CACHE_KEY_ACTIVE_POLL, CACHE_KEY_POLL_HISTORY

_MISSING = object()


class TTLCache:
    """Thread-safe TTL cache with LRU eviction and hit/miss counters."""

    def __init__(self, max_size: int = 100):
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.RLock()
        self._fetch_locks: Dict[str, threading.Lock] = {}
        # Bumped on invalidation so an in-flight fetch cannot store stale data
        self._generations: Dict[str, int] = {}
        self._max_size = max_size
        self._hits = 0
        self._misses = 0

    def get(self, key: str, ttl_seconds: float) -> Any:
        """Return the cached value if younger than ``ttl_seconds``, else ``None``."""
        value = self._lookup(key, ttl_seconds)
        return None if value is _MISSING else value

    def _lookup(self, key: str, ttl_seconds: float) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return _MISSING
            value, stored_at = entry
            if time.time() - stored_at > ttl_seconds:
                del self._entries[key]
                return _MISSING
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (value, time.time())
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)

    def invalidate(self, *keys: str) -> None:
        """Drop ``keys`` so the next read fetches fresh data."""
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)
                self._generations[key] = self._generations.get(key, 0) + 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for key in self._generations:
                self._generations[key] += 1
            self._hits = 0
            self._misses = 0

    def get_or_fetch(self, key: str, fetch: Callable[[], Any], ttl_seconds: float) -> Any:
        """
        Return the cached value for ``key`` or compute it with ``fetch``.

        Concurrent misses for the same key wait on a per-key lock and
        trigger a single database round trip; other keys, reads and
        invalidations are not blocked by the fetch. A value fetched across
        an ``invalidate`` of its key is returned but not stored. Exceptions
        from ``fetch`` propagate and nothing is cached.
        """
        value = self._lookup_counted(key, ttl_seconds)
        if value is not _MISSING:
            return value

        with self._lock:
            fetch_lock = self._fetch_locks.setdefault(key, threading.Lock())

        with fetch_lock:
            # Another thread may have filled the entry while we waited
            with self._lock:
                value = self._lookup(key, ttl_seconds)
                if value is not _MISSING:
                    self._hits += 1
                    return value
                self._misses += 1
                generation = self._generations.setdefault(key, 0)

            value = fetch()

            with self._lock:
                if self._generations.get(key, 0) == generation:
                    self.set(key, value)
            return value

    def _lookup_counted(self, key: str, ttl_seconds: float) -> Any:
        with self._lock:
            value = self._lookup(key, ttl_seconds)
            if value is not _MISSING:
                self._hits += 1
            return value

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            now = time.time()
            return {
                "size": len(self._entries),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(self._hits / total * 100, 2) if total else 0,
                "entries": {
                    key: {
                        "age_seconds": round(now - stored_at, 2),
                        "cached_at": datetime.fromtimestamp(stored_at).isoformat(),
                    }
                    for key, (_, stored_at) in self._entries.items()
                },
            }

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._entries.keys())


# Shared by all request handlers in this process
global_cache = TTLCache()


def invalidate_poll_views(cache: TTLCache = global_cache) -> None:
    """Drop every cached public poll view after a write."""
    cache.invalidate(CACHE_KEY_ACTIVE_POLL, CACHE_KEY_POLL_HISTORY)
