"""
Cache stores for the cached fetcher.

The fetcher only needs two primitives from its cache: a namespaced get and an
atomic add-if-absent with an optional TTL. CacheStore describes that
interface; InMemoryCacheStore implements it on top of cachetools.TLRUCache,
which supports a different expiry per entry.
"""

import math
import time
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, NamedTuple, Optional
import logging

from cachetools import TLRUCache

from .constants import DEFAULT_MEMORY_CACHE_SIZE

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """
    Key-value store consumed by CachedFetcher.

    None is the "absent" marker: a store never holds None as a value, and an
    empty string is a present value.
    """

    @abstractmethod
    def get(self, key: str, namespace: str) -> Optional[Any]:
        """Return the value stored under key in namespace, or None."""

    @abstractmethod
    def add(self, key: str, value: Any, namespace: str, ttl: Optional[int] = None) -> bool:
        """Store value unless the key already exists.

        Args:
            key: Cache key
            value: Value to store, must not be None
            namespace: Cache group the key belongs to
            ttl: Time to live in seconds, None for no expiry

        Returns:
            True if the value was stored, False if the key was already present
        """


class _Entry(NamedTuple):
    value: Any
    ttl: Optional[int]


def _time_to_use(_key, entry: _Entry, now: float) -> float:
    if entry.ttl is None:
        return math.inf
    return now + entry.ttl


class InMemoryCacheStore(CacheStore):
    """
    Thread-safe in-process cache store.

    Features:
    - Per entry TTL via cachetools.TLRUCache, no TTL means no expiry
    - Least recently used eviction once maxsize entries are held
    - Atomic add-if-absent guarded by a lock
    - Cache hit/miss metrics for monitoring
    """

    def __init__(self, maxsize: int = DEFAULT_MEMORY_CACHE_SIZE,
                 timer: Callable[[], float] = time.monotonic):
        """
        Initialize the store.

        Args:
            maxsize: Maximum number of entries across all namespaces
            timer: Clock used for expiry, injectable for tests
        """
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)
        self._lock = threading.Lock()
        self._stats = {
            'hits': 0,
            'misses': 0,
            'stores': 0,
            'rejected': 0
        }
        logger.debug('Initialized InMemoryCacheStore with maxsize=%d', maxsize)

    @staticmethod
    def _full_key(key: str, namespace: str) -> tuple:
        return (namespace, key)

    def get(self, key: str, namespace: str) -> Optional[Any]:
        """
        Get a value from cache if it exists and hasn't expired.

        Args:
            key: Cache key
            namespace: Cache group

        Returns:
            Cached value if available and valid, None otherwise
        """
        with self._lock:
            entry = self._cache.get(self._full_key(key, namespace))
            if entry is None:
                self._stats['misses'] += 1
                return None

            self._stats['hits'] += 1
            logger.debug('Cache hit for key: %s/%s', namespace, key)
            return entry.value

    def add(self, key: str, value: Any, namespace: str, ttl: Optional[int] = None) -> bool:
        if value is None:
            raise ValueError('None cannot be stored, it marks an absent entry')

        full_key = self._full_key(key, namespace)
        with self._lock:
            if full_key in self._cache:
                self._stats['rejected'] += 1
                logger.debug('Not overwriting existing cache entry %s/%s', namespace, key)
                return False

            self._cache[full_key] = _Entry(value, ttl)
            self._stats['stores'] += 1
            logger.debug('Cached value for key: %s/%s (TTL: %s)',
                         namespace, key, f'{ttl}s' if ttl is not None else 'none')
            return True

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()
        logger.info('Cache cleared')

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._stats['hits'] + self._stats['misses']
        hit_rate = (self._stats['hits'] / total_requests * 100) if total_requests > 0 else 0

        with self._lock:
            cache_size = len(self._cache)

        return {
            **self._stats,
            'hit_rate': hit_rate,
            'cache_size': cache_size
        }

    def reset_stats(self):
        """Reset cache statistics."""
        self._stats = {'hits': 0, 'misses': 0, 'stores': 0, 'rejected': 0}
