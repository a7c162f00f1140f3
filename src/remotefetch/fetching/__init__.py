"""
Remotefetch Fetching Package

This package provides the cached fetcher and the collaborators it is
composed of: HTTP client, cache stores, event dispatcher and configuration.

Components:
- constants: Common constants for timeouts, cache durations, etc.
- config: FetcherConfig passed to the fetcher at construction
- http_client: requests based HTTP client returning RemoteResponse objects
- cache_store: Cache store interface and thread-safe in-memory implementation
- redis_store: Cache store on a redis server
- events: Dispatcher for request success/error notifications
- cached_fetcher: Fetch with caching, cache-control and stale fallback
"""

from .constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_CACHE_TIME,
    MIN_CACHE_TIME,
    SUPPRESSION_TTL,
    DEFAULT_CACHE_GROUP,
    EVENT_REQUEST_SUCCESS,
    EVENT_REQUEST_ERROR
)

from .cache_store import CacheStore, InMemoryCacheStore
from .cached_fetcher import CachedFetcher, make_cache_key
from .config import FetcherConfig
from .events import EventDispatcher
from .exceptions import RemoteRequestError
from .http_client import HttpClientManager, RemoteResponse
from .redis_store import RedisCacheStore

__all__ = [
    'DEFAULT_TIMEOUT',
    'DEFAULT_CACHE_TIME',
    'MIN_CACHE_TIME',
    'SUPPRESSION_TTL',
    'DEFAULT_CACHE_GROUP',
    'EVENT_REQUEST_SUCCESS',
    'EVENT_REQUEST_ERROR',
    'CacheStore',
    'InMemoryCacheStore',
    'CachedFetcher',
    'make_cache_key',
    'FetcherConfig',
    'EventDispatcher',
    'RemoteRequestError',
    'HttpClientManager',
    'RemoteResponse',
    'RedisCacheStore'
]
