from .__pkginfo__ import __version__

from .fetching import (
    CachedFetcher,
    FetcherConfig,
    InMemoryCacheStore,
    RedisCacheStore,
    HttpClientManager,
    EventDispatcher,
    RemoteResponse,
    RemoteRequestError
)
from .setup import setup_logging, load_config, build_fetcher
