"""
Caching layer: a TTL-based in-memory cache and a best-effort key-value store.
"""

import time
import threading
from typing import Any, Optional, Dict, Protocol, Tuple
import structlog

from riftcoach.core.exceptions import CacheUnavailable

logger = structlog.get_logger(__name__)


class TTLCache:
    """Simple TTL cache with thread-safe operations."""

    def __init__(self, maxsize: int = 1000, ttl: int = 300):
        """
        Initialize TTL cache.

        Args:
            maxsize: Maximum number of entries
            ttl: Default time to live in seconds
        """
        self.maxsize = maxsize
        self.ttl = ttl
        self.cache: Dict[str, Tuple[Any, float]] = {}
        self.lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache if not expired.

        Args:
            key: Cache key

        Returns:
            Cached value if exists and not expired, None otherwise
        """
        with self.lock:
            if key in self.cache:
                value, expiry = self.cache[key]
                if time.monotonic() < expiry:
                    self._hits += 1
                    logger.debug("Cache hit", key=key, hits=self._hits)
                    return value
                del self.cache[key]
                logger.debug("Cache expired", key=key)
            self._misses += 1
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Per-entry TTL in seconds, defaults to the cache TTL
        """
        with self.lock:
            # Evict the oldest entry when full
            if len(self.cache) >= self.maxsize and key not in self.cache:
                oldest_key = next(iter(self.cache))
                del self.cache[oldest_key]
                logger.debug("Cache eviction", key=oldest_key, reason="full")

            entry_ttl = self.ttl if ttl is None else ttl
            self.cache[key] = (value, time.monotonic() + entry_ttl)
            logger.debug("Cache set", key=key, ttl=entry_ttl)

    def clear(self) -> None:
        """Clear all entries from cache."""
        with self.lock:
            count = len(self.cache)
            self.cache.clear()
            self._hits = 0
            self._misses = 0
            logger.info("Cache cleared", entries_removed=count)

    def stats(self) -> Dict[str, float]:
        """Get cache statistics."""
        with self.lock:
            total = self._hits + self._misses
            return {
                "size": len(self.cache),
                "maxsize": self.maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def __len__(self) -> int:
        """Get number of entries in cache."""
        return len(self.cache)


class KeyValueStore(Protocol):
    """Async key-value store with per-entry TTL."""

    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None on miss."""
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value for ``ttl`` seconds."""
        ...


class InMemoryKeyValueStore:
    """Process-local ``KeyValueStore`` backed by ``TTLCache``."""

    def __init__(self, cache: TTLCache):
        self._cache = cache

    async def get(self, key: str) -> Optional[Any]:
        return self._cache.get(key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        self._cache.set(key, value, ttl=ttl)


class BestEffortCache:
    """Wraps a ``KeyValueStore`` so reads and writes never raise.

    A failing store behaves like an empty cache: ``get`` returns None and
    ``set`` is dropped. Failures are logged as ``CacheUnavailable``.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get(self, key: str) -> Optional[Any]:
        try:
            return await self.store.get(key)
        except Exception as e:
            self._log_failure(CacheUnavailable("Cache read failed", key, e))
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self.store.set(key, value, ttl)
        except Exception as e:
            self._log_failure(CacheUnavailable("Cache write failed", key, e))

    @staticmethod
    def _log_failure(error: CacheUnavailable) -> None:
        logger.warning(
            error.message,
            key=error.context.get("key"),
            error_type=type(error.original_error).__name__,
            error=str(error.original_error),
        )


def analysis_cache_key(puuid: str, queue: str) -> str:
    """Cache key for a computed player analysis."""
    return f"analysis:{puuid}:{queue}"


# Process-wide stores
analysis_store = InMemoryKeyValueStore(TTLCache(maxsize=500, ttl=300))
benchmark_cache = TTLCache(maxsize=2000, ttl=3600)
