import argparse
import json
import os
import sys
import logging

from .setup import setup_logging, load_config, build_fetcher
from .fetching.constants import DEFAULT_TIMEOUT, DEFAULT_CACHE_TIME


CONFIGFILE = "config/remotefetch_config.yaml"
LOGFILE_ENABLED_DEFAULT = False
LOGFILE = "logs/remotefetch.log"
MAX_LOGFILE_SIZE_KB_DEFAULT = 200


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='remotefetch',
        description='Fetch remote URLs through a cache with stale fallback.')
    parser.add_argument('urls', nargs='+', metavar='URL')
    parser.add_argument('-c', '--config', default=CONFIGFILE,
                        help='YAML config file (default: %(default)s)')
    parser.add_argument('--json', action='store_true',
                        help='decode the responses as JSON')
    parser.add_argument('--timeout', type=int, default=DEFAULT_TIMEOUT)
    parser.add_argument('--cache-time', type=int, default=DEFAULT_CACHE_TIME)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    # Configure a basic logger to be able to log even before the configuration is loaded
    setup_logging(level=logging.INFO)
    logger = logging.getLogger(__name__)

    if os.path.isfile(args.config):
        logger.info('Using config file at %s', args.config)
        config = load_config(args.config)
    else:
        logger.info('No config file at %s, using defaults', args.config)
        config = {}

    loglevel = config.get('loglevel', 'info')
    logfile_enabled = config.get('logfile_enabled', LOGFILE_ENABLED_DEFAULT)
    logfile = config.get('logfile_path', LOGFILE) if logfile_enabled else None
    max_logfile_size = config.get('max_logfile_size', MAX_LOGFILE_SIZE_KB_DEFAULT)

    # Establish the loglevel mapping
    loglevel_mapping = {
        'debug': logging.DEBUG,
        'warning': logging.WARNING,
        'error': logging.ERROR,
        'info': logging.INFO
    }

    setup_logging(level=loglevel_mapping.get(loglevel, logging.INFO), logfile=logfile,
                  max_logfile_size_kb=max_logfile_size)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)

    fetcher = build_fetcher(config)

    exit_code = 0
    for url in args.urls:
        if args.json:
            data = fetcher.fetch_json(url)
            if data is False:
                exit_code = 1
                continue
            print(json.dumps(data, indent=2))
        else:
            content = fetcher.fetch(url, timeout=args.timeout, cache_time=args.cache_time)
            if content is None:
                exit_code = 1
                continue
            print(content)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
