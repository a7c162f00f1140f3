"""
Constants for the remotefetch fetching infrastructure.

This module defines the timeout limits, cache durations and cache key
suffixes shared by the cached fetcher and its collaborators.

Cache Strategy Overview:
- Primary entry: holds the body for the negotiated cache time
- Backup entry: holds the last good body without expiry, served during outages
- Suppression entry: short lived marker that blocks requests after a failure
"""

# Timeout constants (in seconds)
DEFAULT_TIMEOUT = 3        # Default blocking timeout for a remote request
RECOMMENDED_MAX_TIMEOUT = 3  # Longer timeouts block the caller noticeably
MIN_TIMEOUT = 1
MAX_TIMEOUT = 10

# Cache TTL constants (in seconds)
DEFAULT_CACHE_TIME = 900   # 15 minutes - requested cache time if none given
MIN_CACHE_TIME = 60        # Cache time is never shorter than a minute
SUPPRESSION_TTL = 60       # Cool-down after a failed request without backup

# JSON convenience wrapper
JSON_TIMEOUT = 3
JSON_CACHE_TIME = 900

# Cache namespace and key suffixes
DEFAULT_CACHE_GROUP = "remote_fetch"
BACKUP_KEY_SUFFIX = "_backup"
DISABLE_KEY_SUFFIX = "_disable"
SUPPRESSION_MARKER = 1

# In-memory store sizing
DEFAULT_MEMORY_CACHE_SIZE = 1024

# Event names
EVENT_REQUEST_SUCCESS = "remote_request_success"
EVENT_REQUEST_ERROR = "remote_request_error"

# HTTP
HTTP_OK = 200
CACHE_CONTROL_HEADER = "cache-control"
MAX_AGE_DIRECTIVE = "max-age"
