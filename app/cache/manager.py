"""
Process-local response cache with lazy expiry and background refresh.
"""
import threading
import logging
import time
from typing import Dict, Optional, Callable, Any
from concurrent.futures import Executor, Future, ThreadPoolExecutor

from .core import CacheEntry, CacheKey

logger = logging.getLogger("cache.manager")


class ResponseCache:
    """
    Key-value store of resolved lookups, each with an expiry timestamp.

    - put() overwrites unconditionally (last write wins)
    - get() returns the value until it expires, then evicts it
    - No background sweep: expired entries are removed on read
    - refresh_in_background() runs a refresh without the caller waiting on it

    Usage:
        cache = ResponseCache(ttl_seconds=30)
        cache.put(("s1mple", "cs2"), result)
        cached = cache.get(("s1mple", "cs2"))
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.time,
        executor: Optional[Executor] = None,
        max_refresh_workers: int = 4,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Default time-to-live for put()
            clock: Returns the current time in seconds
            executor: Runs background refreshes (a thread pool by default)
            max_refresh_workers: Pool size when no executor is given
        """
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_refresh_workers,
            thread_name_prefix="cache-refresh",
        )
        self._refreshing: set = set()
        self._refreshing_lock = threading.Lock()

        self._stats = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "refreshes_started": 0,
            "refreshes_failed": 0,
        }

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def put(self, key: CacheKey, value: Any, ttl: Optional[float] = None) -> None:
        """Store value, replacing any previous entry for key."""
        ttl = self._ttl if ttl is None else ttl
        entry = CacheEntry(value=value, expires_at=self._clock() + ttl)
        with self._lock:
            self._entries[key] = entry
        logger.debug(f"CACHE PUT: {key} [ttl={ttl}s]")

    def get(self, key: CacheKey) -> Optional[Any]:
        """
        Return the stored value, or None if absent or expired.

        An expired entry is evicted here, so later reads stay absent until
        the next put().
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None
            if entry.is_expired(now):
                del self._entries[key]
                self._stats["expired"] += 1
                self._stats["misses"] += 1
                logger.debug(f"CACHE EXPIRED: {key}")
                return None
            self._stats["hits"] += 1

        logger.debug(f"CACHE HIT: {key} [remaining={entry.remaining_seconds(now):.1f}s]")
        return entry.value

    def refresh_in_background(
        self,
        key: CacheKey,
        refresh_fn: Callable[[], Any],
    ) -> Optional[Future]:
        """
        Run refresh_fn without blocking the caller.

        refresh_fn is expected to write its own result into the cache.
        The returned future is not awaited by anyone; its outcome goes to
        _discard_refresh_outcome(). Returns None if a refresh for key is
        already running.
        """
        with self._refreshing_lock:
            if key in self._refreshing:
                logger.debug(f"Already refreshing: {key}")
                return None
            self._refreshing.add(key)
            self._stats["refreshes_started"] += 1

        try:
            future = self._executor.submit(refresh_fn)
        except RuntimeError:
            # Executor shut down
            with self._refreshing_lock:
                self._refreshing.discard(key)
            raise

        future.add_done_callback(lambda f: self._discard_refresh_outcome(key, f))
        return future

    def _discard_refresh_outcome(self, key: CacheKey, future: Future) -> None:
        """
        Drop the result of a background refresh.

        This is the only place refresh errors end up: they are logged and
        never reach a caller. The next request sees whatever the refresh
        managed to write.
        """
        error = future.exception()
        with self._refreshing_lock:
            self._refreshing.discard(key)
            if error is not None:
                self._stats["refreshes_failed"] += 1

        if error is not None:
            logger.warning(f"Background refresh failed: {key} - {error}")
        else:
            logger.debug(f"Background refresh complete: {key}")

    def is_refreshing(self, key: CacheKey) -> bool:
        with self._refreshing_lock:
            return key in self._refreshing

    def clear(self) -> int:
        """
        Clear all cache entries.

        Returns:
            Number of entries cleared
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting background refreshes."""
        self._executor.shutdown(wait=wait)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._stats["hits"] + self._stats["misses"]
            hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0
            stats = dict(self._stats)
            stats["entries"] = len(self._entries)
        stats["ttl_seconds"] = self._ttl
        stats["hit_rate_percent"] = round(hit_rate, 1)
        with self._refreshing_lock:
            stats["refreshing_count"] = len(self._refreshing)
        return stats
