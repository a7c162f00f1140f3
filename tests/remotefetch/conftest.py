"""Shared fixtures for remotefetch tests."""

from unittest.mock import Mock

import pytest

from remotefetch.fetching import (
    CachedFetcher,
    EventDispatcher,
    FetcherConfig,
    InMemoryCacheStore,
    RemoteResponse,
)


class FakeClock:
    """Manually advanced clock for TTL assertions."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class RecordingCacheStore(InMemoryCacheStore):
    """In-memory store that remembers every successful add with its TTL."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.writes = []

    def add(self, key, value, namespace, ttl=None):
        stored = super().add(key, value, namespace, ttl)
        if stored:
            self.writes.append((key, value, namespace, ttl))
        return stored

    def ttl_for(self, suffix=''):
        """TTL of the stored entry whose key ends with suffix (primary for '')."""
        for key, _value, _namespace, ttl in self.writes:
            if suffix and key.endswith(suffix):
                return ttl
            if not suffix and not key.endswith(('_backup', '_disable')):
                return ttl
        raise KeyError(suffix)


def ok_response(body='{"x": 1}', cache_control=None, status_code=200):
    headers = {'Content-Type': 'application/json'}
    if cache_control is not None:
        headers['Cache-Control'] = cache_control
    return RemoteResponse(status_code=status_code, body=body, headers=headers,
                          reason='OK' if status_code == 200 else 'Error')


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return RecordingCacheStore(timer=clock)


@pytest.fixture
def http_client():
    client = Mock()
    client.get.return_value = ok_response()
    return client


@pytest.fixture
def events():
    return EventDispatcher()


@pytest.fixture
def fetcher(http_client, store, events):
    return CachedFetcher(http_client=http_client, cache_store=store,
                         config=FetcherConfig(site_id=7), events=events)


@pytest.fixture
def make_response():
    return ok_response
