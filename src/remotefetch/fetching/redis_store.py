"""Redis backed cache store for deployments with several processes or hosts.

Requires the 'redis' package: pip install remotefetch[redis].
Add-if-absent maps onto SET with NX, so concurrent writers on different
hosts cannot clobber each other.
"""

import logging
from typing import Any, Optional

from .cache_store import CacheStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "remotefetch:"


class RedisCacheStore(CacheStore):
    """Cache store on top of a redis server."""

    def __init__(self, redis_url: Optional[str] = None, client=None,
                 key_prefix: str = DEFAULT_KEY_PREFIX):
        if client is None:
            if not redis_url:
                raise ValueError('Either redis_url or client is required')
            try:
                import redis
            except ImportError as e:
                raise ImportError(
                    "redis package required: pip install remotefetch[redis]"
                ) from e
            client = redis.Redis.from_url(redis_url, decode_responses=True)

        self._client = client
        self._key_prefix = key_prefix

    def _redis_key(self, key: str, namespace: str) -> str:
        return f"{self._key_prefix}{namespace}:{key}"

    def get(self, key: str, namespace: str) -> Optional[Any]:
        value = self._client.get(self._redis_key(key, namespace))
        if isinstance(value, bytes):
            value = value.decode('utf-8')
        return value

    def add(self, key: str, value: Any, namespace: str, ttl: Optional[int] = None) -> bool:
        if value is None:
            raise ValueError('None cannot be stored, it marks an absent entry')

        stored = self._client.set(self._redis_key(key, namespace), value, nx=True, ex=ttl)
        if not stored:
            logger.debug('Not overwriting existing redis entry %s/%s', namespace, key)
        return bool(stored)

    def close(self) -> None:
        """Close the redis connection."""
        self._client.close()
