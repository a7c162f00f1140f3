"""
HTTP client manager used by the cached fetcher.

This module wraps a requests.Session behind a small interface: a single
blocking GET that returns a RemoteResponse for every HTTP status and raises
RemoteRequestError when the origin cannot be reached.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol
import logging

import requests
from requests.structures import CaseInsensitiveDict

from .exceptions import RemoteRequestError

logger = logging.getLogger(__name__)


@dataclass
class RemoteResponse:
    """Status, headers and body of a completed HTTP request."""
    status_code: int
    body: str = ''
    headers: Mapping[str, Any] = field(default_factory=dict)
    reason: str = ''

    def header(self, name: str) -> Any:
        """Look up a response header, ignoring case.

        Returns:
            The header value as the client delivered it (string or list), or None
        """
        if isinstance(self.headers, CaseInsensitiveDict):
            return self.headers.get(name)
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class HttpClient(Protocol):
    """Interface of the HTTP client consumed by CachedFetcher."""

    def get(self, url: str, timeout: int, **options) -> RemoteResponse:
        """Perform a blocking GET request.

        Raises:
            RemoteRequestError: If the origin could not be reached
        """


class HttpClientManager:
    """
    requests based HTTP client for the cached fetcher.

    Features:
    - Shared session for connection reuse
    - No exception for HTTP error statuses, the caller decides
    - Transport errors converted to RemoteRequestError
    - Request logging and metrics
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self._stats = {
            'requests_made': 0,
            'requests_failed': 0
        }

    def get(self, url: str, timeout: int, **options) -> RemoteResponse:
        """
        Make a single GET request.

        Args:
            url: URL to request
            timeout: Timeout in seconds
            **options: Additional arguments for requests.Session.get()
                (headers, params, auth, verify, ...)

        Returns:
            RemoteResponse for any HTTP status

        Raises:
            RemoteRequestError: If the request could not be completed
        """
        start_time = time.time()
        try:
            logger.debug(f"Making GET request to {url} (timeout: {timeout}s)")

            response = self.session.get(url, timeout=timeout, **options)
            duration = time.time() - start_time

            self._stats['requests_made'] += 1
            logger.info(f"Request to {url} completed in {duration:.2f}s "
                        f"(status: {response.status_code})")

            return RemoteResponse(
                status_code=response.status_code,
                body=response.text,
                headers=CaseInsensitiveDict(response.headers),
                reason=response.reason or ''
            )

        except requests.exceptions.RequestException as e:
            duration = time.time() - start_time
            self._stats['requests_failed'] += 1
            logger.debug(f"Request to {url} failed after {duration:.2f}s: {e}")
            raise RemoteRequestError(f"Request failed: {e}", url=url) from e

    def close(self):
        """Close the underlying session."""
        self.session.close()

    def get_stats(self) -> Dict[str, Any]:
        """Get HTTP client statistics."""
        total_requests = self._stats['requests_made'] + self._stats['requests_failed']
        success_rate = (self._stats['requests_made'] / total_requests * 100) if total_requests > 0 else 0

        return {
            **self._stats,
            'success_rate': success_rate
        }

    def reset_stats(self):
        """Reset HTTP client statistics."""
        self._stats = {
            'requests_made': 0,
            'requests_failed': 0
        }
