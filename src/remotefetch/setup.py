import logging
import sys
import os
import yaml
from logging.handlers import RotatingFileHandler

from .fetching import (
    CachedFetcher,
    FetcherConfig,
    InMemoryCacheStore,
    RedisCacheStore,
)
from .fetching.constants import DEFAULT_MEMORY_CACHE_SIZE

logger = logging.getLogger(__name__)

CACHE_BACKENDS = ('memory', 'redis')


def setup_logging(level=logging.INFO, logfile=None, max_logfile_size_kb=200):
    """Configure root logger with consistent formatting.

    Args:
        level (int): Log level to set for the root logger.
        logfile (str): If specified, log to this file as well as the console.
        max_logfile_size_kb (int): Size at which the logfile is rotated.

    Returns:
        logging.Logger: Root logger
    """
    # Create root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers = []

    # Create formatter with module name included
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        "%Y-%m-%d %H:%M:%S"
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler if specified
    if logfile:
        logdir = os.path.dirname(logfile)
        if logdir and not os.path.exists(logdir):
            os.makedirs(logdir)
        file_handler = RotatingFileHandler(
            logfile, maxBytes=max_logfile_size_kb * 1024, backupCount=2)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def load_config(configfile: str) -> dict:
    """ Load the configuration file and check for validity.

    Args:
        configfile (str): Path to the config file

    Returns:
        dict: The loaded configuration

    Raises:
        RuntimeError: If the config file is not found or is not a mapping
    """
    if not os.path.isfile(configfile):
        raise RuntimeError(f'Configfile {configfile} not found')

    with open(configfile, 'r', encoding='UTF-8') as f:
        config_str = f.read()

    config = yaml.safe_load(config_str) or {}

    if not isinstance(config, dict):
        raise RuntimeError(f'Configfile {configfile} does not contain a mapping')

    cache_backend = (config.get('cache') or {}).get('backend', 'memory')
    if cache_backend not in CACHE_BACKENDS:
        raise RuntimeError(f'Unknown cache backend {cache_backend}, '
                           f'expected one of {CACHE_BACKENDS}')

    return config


def build_fetcher(config: dict) -> CachedFetcher:
    """Create a CachedFetcher from a loaded configuration."""
    fetcher_config = FetcherConfig.from_dict(config.get('fetcher'))

    cache_config = config.get('cache') or {}
    if cache_config.get('backend', 'memory') == 'redis':
        logger.info('Using redis cache store at %s', cache_config.get('redis_url'))
        cache_store = RedisCacheStore(redis_url=cache_config.get('redis_url'))
    else:
        cache_store = InMemoryCacheStore(
            maxsize=int(cache_config.get('maxsize', DEFAULT_MEMORY_CACHE_SIZE)))

    return CachedFetcher(cache_store=cache_store, config=fetcher_config)
