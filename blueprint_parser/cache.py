"""
In-memory result cache with per-entry expiry.

Wraps fetch-and-parse calls so repeated queries within the TTL do not hit
the remote site again.  Keys are built from the caller's query parameters.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .schemas import BlueprintSearchParams
from .logger import get_module_logger

logger = get_module_logger("cache")

DEFAULT_SWEEP_THRESHOLD = 256


@dataclass
class CacheEntry:
    value: Any
    expires_at: float  # clock() reading, in seconds


class ResultCache:
    """
    Key → value store with a time-to-live per entry.

    Expired entries are evicted when read, and all at once whenever a put
    finds sweep_threshold entries stored.  Used from a single event loop, so
    there is no locking.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        sweep_threshold: int = DEFAULT_SWEEP_THRESHOLD
    ):
        """
        Initialize the cache.

        Args:
            clock: Returns the current time in seconds.
                   Defaults to time.monotonic (tests pass a fake clock).
            sweep_threshold: Entry count at which put() drops expired entries
        """
        self._clock = clock or time.monotonic
        self.sweep_threshold = sweep_threshold
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or an expired entry."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache miss for key: {key}")
            return None

        if self._clock() > entry.expires_at:
            logger.debug(f"Cache expired for key: {key}")
            del self._entries[key]
            return None

        logger.debug(f"Cache hit for key: {key}")
        return entry.value

    def put(self, key: str, value: Any, ttl_ms: int) -> None:
        """Store value for ttl_ms milliseconds."""
        if len(self._entries) >= self.sweep_threshold:
            self.evict_expired()
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl_ms / 1000)
        logger.debug(f"Cached key: {key} (ttl {ttl_ms} ms)")

    def evict_expired(self) -> int:
        """Drop every expired entry. Returns count of evicted entries."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired cache entries")
        return len(expired)

    def exists(self, key: str) -> bool:
        """Check if a live entry is cached."""
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Delete an entry. Returns True if it was present."""
        if self._entries.pop(key, None) is None:
            return False
        logger.debug(f"Deleted cache key: {key}")
        return True

    def clear(self) -> int:
        """Clear all entries. Returns count of deleted entries."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} cached results")
        return count

    def __len__(self) -> int:
        return len(self._entries)


# --- Key builders ---

def search_cache_key(params: BlueprintSearchParams) -> str:
    """Key for a listing query; tag order is significant, as in the URL."""
    return f"search:{params.search}|{','.join(params.tags)}|{params.author}"


def details_cache_key(path: str, include_blueprint: bool) -> str:
    """Key for a detail query; with and without payload are cached apart."""
    return f"details:{path}|{'blueprint' if include_blueprint else 'summary'}"


# Singleton default cache, shared by services created without one
_default_cache: Optional[ResultCache] = None


def get_default_cache() -> ResultCache:
    """Get or create the default cache instance."""
    global _default_cache
    if _default_cache is None:
        _default_cache = ResultCache()
    return _default_cache
