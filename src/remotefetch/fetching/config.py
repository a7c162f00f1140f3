"""
Configuration for the cached fetcher.

The values here used to be process-wide switches. They are bundled into a
FetcherConfig that is handed to the fetcher at construction, so several
fetchers with different settings can live in one process.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_CACHE_GROUP,
    MIN_CACHE_TIME,
    SUPPRESSION_TTL,
)

logger = logging.getLogger(__name__)


@dataclass
class FetcherConfig:
    """Settings for a CachedFetcher instance.

    Attributes:
        site_id: Identifier of the site/tenant, only used to annotate log lines
        disable_error_reporting: Suppress failure log lines when True
        admin_context: Requests are made from an admin context where long
            timeouts are acceptable; silences the slow timeout warning
        cache_group: Namespace used for all cache entries
        suppression_ttl: Seconds to skip requests after a failure
        min_cache_time: Lower bound for the primary entry TTL
    """
    site_id: Optional[Any] = None
    disable_error_reporting: bool = False
    admin_context: bool = False
    cache_group: str = DEFAULT_CACHE_GROUP
    suppression_ttl: int = SUPPRESSION_TTL
    min_cache_time: int = MIN_CACHE_TIME

    def __post_init__(self):
        if not self.cache_group:
            raise ValueError('cache_group must not be empty')
        for name in ('suppression_ttl', 'min_cache_time'):
            value = getattr(self, name)
            if int(value) <= 0:
                raise ValueError(f'{name} must be a positive number of seconds, got {value}')
            setattr(self, name, int(value))

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> 'FetcherConfig':
        """Build a FetcherConfig from the 'fetcher' section of the config file.

        Unknown keys are ignored with a warning.
        """
        if not config:
            return cls()

        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in config.items():
            if key in known:
                kwargs[key] = value
            else:
                logger.warning('Ignoring unknown fetcher config key: %s', key)

        return cls(**kwargs)
