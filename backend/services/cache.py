"""
Report Cache - process-wide TTL cache for aggregated responses.

Entries are whole JSON-serializable values keyed by a query signature
(see utils.cache_key). Values are never mutated after set(); a refresh
replaces the entry, so readers never observe a half-built result.

Usage:
    from services.cache import TTLCache

    cache = TTLCache(maxsize=500, ttl=300)
    result = cache.get_or_compute("stats:summary:", compute_summary)
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_SIZE = 500


class TTLCache:
    """Simple TTL cache with max size limit."""

    def __init__(self, maxsize: int = DEFAULT_MAX_SIZE, ttl: int = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        # key -> (value, expires_at, stored_at)
        self._cache = {}
        self._maxsize = maxsize
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()

        # key -> [lock, holders] for cache stampede prevention
        self._key_locks = {}
        self._key_locks_lock = threading.Lock()

        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            value = self._lookup(key)
            if value is not None:
                self._hits += 1
            else:
                self._misses += 1
            return value

    def _lookup(self, key: str) -> Optional[Any]:
        # Caller holds self._lock; does not touch hit/miss counters
        entry = self._cache.get(key)
        if entry is None:
            return None
        value, expires_at, _ = entry
        if self._clock() < expires_at:
            return value
        del self._cache[key]
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = self._ttl if ttl is None else ttl
        with self._lock:
            now = self._clock()
            # Evict oldest entries if at capacity
            if key not in self._cache and len(self._cache) >= self._maxsize:
                oldest_key = min(self._cache.keys(), key=lambda k: self._cache[k][2])
                del self._cache[oldest_key]
            self._cache[key] = (value, now + ttl, now)

    @contextmanager
    def _key_lock(self, key: str):
        """
        Hold the compute lock for key.

        Entries are reference-counted and removed once the last holder or
        waiter leaves, so _key_locks only contains keys being computed.
        """
        with self._key_locks_lock:
            entry = self._key_locks.get(key)
            if entry is None:
                entry = self._key_locks[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._key_locks_lock:
                entry[1] -= 1
                if entry[1] == 0 and self._key_locks.get(key) is entry:
                    del self._key_locks[key]

    def get_or_compute(self, key: str, compute: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """
        Return the cached value for key, computing and storing it on a miss.

        Concurrent misses on the same key compute once; the others wait and
        read the stored value. Exceptions from compute propagate and nothing
        is cached.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        with self._key_lock(key):
            with self._lock:
                cached = self._lookup(key)
            if cached is not None:
                return cached

            start = time.perf_counter()
            value = compute()
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.set(key, value, ttl)
            logger.info(f"Cache miss for {key}, computed in {elapsed_ms:.1f}ms")
            return value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'size': len(self._cache),
                'maxsize': self._maxsize,
                'ttl': self._ttl,
                'hits': self._hits,
                'misses': self._misses,
            }
