"""
Cached fetcher for remote URLs.

CachedFetcher decides on every call whether to serve a cached body, make a
live request, honour the origin's cache-control header, or fall back to the
last good body while temporarily suppressing further requests to a failing
origin.

Three cache entries exist per request key, all in the configured cache group:
- primary  (<key>):          body, TTL = negotiated cache time
- backup   (<key>_backup):   body, no expiry
- disable  (<key>_disable):  marker, TTL = suppression_ttl after a failure
"""

import hashlib
import json
import logging
from typing import Any, Dict, Optional, Union

from .cache_control import parse_max_age
from .cache_store import CacheStore, InMemoryCacheStore
from .config import FetcherConfig
from .constants import (
    BACKUP_KEY_SUFFIX,
    CACHE_CONTROL_HEADER,
    DEFAULT_CACHE_TIME,
    DEFAULT_TIMEOUT,
    DISABLE_KEY_SUFFIX,
    EVENT_REQUEST_ERROR,
    EVENT_REQUEST_SUCCESS,
    HTTP_OK,
    JSON_CACHE_TIME,
    JSON_TIMEOUT,
    MAX_TIMEOUT,
    MIN_TIMEOUT,
    RECOMMENDED_MAX_TIMEOUT,
    SUPPRESSION_MARKER,
)
from .events import EventDispatcher
from .exceptions import RemoteRequestError
from .http_client import HttpClient, HttpClientManager, RemoteResponse

logger = logging.getLogger(__name__)

EXTRA_ARGS_DEFAULTS = {
    # Use the cache-control max-age if it is greater than the requested cache time
    'obey_cache_control_header': True,
    # Passed through to the HTTP client (headers, params, auth, ...)
    'http_client_options': {},
}

FetchResult = Union[RemoteResponse, RemoteRequestError]


def merge_extra_args(extra_args: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge caller supplied extra args over the defaults."""
    merged = dict(EXTRA_ARGS_DEFAULTS)
    if extra_args:
        merged.update(extra_args)
    merged['http_client_options'] = dict(merged['http_client_options'] or {})
    return merged


def _stable_json_default(value: Any) -> Any:
    """Encode option values that json cannot serialize on its own.

    Sets are sorted, plain objects are encoded by type name and attributes
    instead of their repr, which usually carries a memory address.
    """
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    if hasattr(value, '__dict__'):
        cls = type(value)
        return {'__type__': f'{cls.__module__}.{cls.__qualname__}', **vars(value)}
    return str(value)


def make_cache_key(url: str, extra_args: Dict[str, Any]) -> str:
    """Derive the cache key for a request.

    The key is a sha256 digest over a sorted JSON serialization of the merged
    extra args plus the URL, so identical requests share a key and any
    difference in the extra args yields a different one.

    Values JSON cannot encode are reduced by _stable_json_default. Objects
    whose attributes are not stable across processes (open sessions, locks)
    still yield a key that is only stable within one process.
    """
    payload = dict(extra_args)
    payload['url'] = url
    try:
        serialized = json.dumps(payload, sort_keys=True, default=_stable_json_default)
    except ValueError:
        # Circular references in option objects
        serialized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode('utf-8')).hexdigest()


def clamp_timeout(timeout) -> int:
    """Clamp the timeout into the accepted 1-10 second range."""
    return min(MAX_TIMEOUT, max(MIN_TIMEOUT, int(timeout)))


class CachedFetcher:
    """
    Fetch remote content through a cache with stale fallback.

    Usage:
        fetcher = CachedFetcher(config=FetcherConfig(site_id=42))
        fetcher.events.subscribe('remote_request_error', on_error)
        body = fetcher.fetch('https://example.com/feed.xml', timeout=3, cache_time=900)
        data = fetcher.fetch_json('https://example.com/a.json')
    """

    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        cache_store: Optional[CacheStore] = None,
        config: Optional[FetcherConfig] = None,
        events: Optional[EventDispatcher] = None
    ):
        """
        Initialize the fetcher.

        Args:
            http_client: Client performing the GET requests (requests based by default)
            cache_store: Store for primary, backup and suppression entries
                (in-memory by default)
            config: Fetcher settings
            events: Dispatcher notified about request outcomes
        """
        self.http_client = http_client or HttpClientManager()
        self.cache_store = cache_store or InMemoryCacheStore()
        self.config = config or FetcherConfig()
        self.events = events or EventDispatcher()

    def fetch(
        self,
        url: str,
        timeout: int = DEFAULT_TIMEOUT,
        cache_time: int = DEFAULT_CACHE_TIME,
        extra_args: Optional[Dict[str, Any]] = None,
        site_id: Optional[Any] = None
    ) -> Optional[str]:
        """
        Fetch a remote URL and cache the result.

        Keep the timeout at 3 seconds or below where possible: the request
        blocks the caller until the origin answers.

        Args:
            url: URL to fetch
            timeout: Timeout in seconds, clamped to 1-10
            cache_time: Minimum cache time in seconds, never below min_cache_time
            extra_args: 'obey_cache_control_header' (bool) and
                'http_client_options' (dict passed to the HTTP client)
            site_id: Site/tenant identifier for log lines, defaults to config.site_id

        Returns:
            The body (possibly a stale backup), or None if no content is available
        """
        extra_args = merge_extra_args(extra_args)
        cache_key = make_cache_key(url, extra_args)
        backup_key = cache_key + BACKUP_KEY_SUFFIX
        disable_key = cache_key + DISABLE_KEY_SUFFIX
        group = self.config.cache_group

        # Empty strings are valid content, None means no cache
        cached = self._cache_get(cache_key, group)
        if cached is not None:
            logger.debug('Serving %s from cache', url)
            return cached

        timeout = clamp_timeout(timeout)
        if timeout > RECOMMENDED_MAX_TIMEOUT and not self.config.admin_context:
            logger.warning(
                'Using a timeout of %ds for %s is strongly discouraged, the caller '
                'waits for the remote request to finish', timeout, url)

        result: Optional[FetchResult] = None
        if self._cache_get(disable_key, group) is not None:
            logger.debug('Skipping request to %s, previous attempt failed recently', url)
        else:
            result = self._request(url, timeout, extra_args['http_client_options'])

        if isinstance(result, RemoteResponse) and result.status_code == HTTP_OK:
            content = result.body
            final_cache_time = self._negotiate_cache_time(result, cache_time, extra_args)

            self._cache_add(cache_key, content, group, final_cache_time)
            self._cache_add(backup_key, content, group)

            self.events.dispatch(EVENT_REQUEST_SUCCESS, url, result)
            return content

        backup = self._cache_get(backup_key, group)
        if backup is not None:
            if result is not None:
                self._report_failure(url, result, site_id)
            return backup

        if result is not None:
            # No content at all, don't try again for a while
            self._cache_add(disable_key, SUPPRESSION_MARKER, group,
                            self.config.suppression_ttl)
            self._report_failure(url, result, site_id)
            self.events.dispatch(EVENT_REQUEST_ERROR, url, result)

        return None

    def fetch_json(self, url: str) -> Union[dict, list, bool]:
        """
        Fetch a URL and decode its body as JSON.

        Returns:
            The decoded object or array, False if there is no content, the
            body is not valid JSON, or it decodes to a scalar
        """
        content = self.fetch(url, JSON_TIMEOUT, JSON_CACHE_TIME)
        if not content:
            return False

        try:
            data = json.loads(content)
        except ValueError as e:
            logger.debug('Response from %s is not valid JSON: %s', url, e)
            return False

        if not isinstance(data, (dict, list)):
            return False

        return data

    def _request(self, url: str, timeout: int, options: Dict[str, Any]) -> FetchResult:
        """Make the single live request of a fetch call, never raising."""
        options = dict(options)
        options.pop('timeout', None)
        try:
            return self.http_client.get(url, timeout=timeout, **options)
        except RemoteRequestError as e:
            return e
        except Exception as e:  # pylint: disable=broad-except
            logger.debug('Unexpected error during fetch of %s: %s', url, e, exc_info=True)
            return RemoteRequestError(f'Fetch failed: {e}', url=url)

    def _cache_get(self, key: str, group: str) -> Optional[Any]:
        """Read from the cache store, treating a store failure as a miss."""
        try:
            return self.cache_store.get(key, group)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning('Cache store read of %s/%s failed: %s', group, key, e)
            return None

    def _cache_add(self, key: str, value: Any, group: str, ttl: Optional[int] = None) -> bool:
        """Write to the cache store, treating a store failure as not stored."""
        try:
            return self.cache_store.add(key, value, group, ttl)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning('Cache store write of %s/%s failed: %s', group, key, e)
            return False

    def _negotiate_cache_time(self, response: RemoteResponse, cache_time,
                              extra_args: Dict[str, Any]) -> int:
        """Apply the origin's max-age (extend only) and the minimum cache time."""
        cache_time = int(cache_time)

        if extra_args['obey_cache_control_header']:
            max_age = parse_max_age(response.header(CACHE_CONTROL_HEADER))
            if max_age is not None and max_age > cache_time:
                logger.debug('Extending cache time from %ds to max-age %ds', cache_time, max_age)
                cache_time = max_age

        return max(cache_time, self.config.min_cache_time)

    def _report_failure(self, url: str, result: FetchResult, site_id: Optional[Any]):
        """Log why a remote request failed unless error reporting is disabled."""
        if self.config.disable_error_reporting:
            return

        if site_id is None:
            site_id = self.config.site_id

        if isinstance(result, RemoteResponse):
            logger.error('Site %s: Failure for %s and the result was: %s %s %s',
                         site_id, url, dict(result.headers), result.status_code, result.reason)
        else:
            logger.error('Site %s: Failure for %s and the result was: %s',
                         site_id, url, result)
