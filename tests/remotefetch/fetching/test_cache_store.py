"""Unit tests for fetching.cache_store module"""

import threading

import pytest

from remotefetch.fetching import InMemoryCacheStore


class TestInMemoryCacheStore:
    """Test suite for InMemoryCacheStore class"""

    def test_get_missing(self, clock):
        store = InMemoryCacheStore(timer=clock)
        assert store.get('key', 'group') is None

    def test_add_and_get(self, clock):
        store = InMemoryCacheStore(timer=clock)
        assert store.add('key', 'value', 'group', 60) is True
        assert store.get('key', 'group') == 'value'

    def test_empty_string_is_present(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', '', 'group', 60)
        assert store.get('key', 'group') == ''

    def test_add_does_not_overwrite(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', 'first', 'group', 60)

        assert store.add('key', 'second', 'group', 60) is False
        assert store.get('key', 'group') == 'first'

    def test_namespaces_are_separate(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', 'a', 'one')
        store.add('key', 'b', 'two')

        assert store.get('key', 'one') == 'a'
        assert store.get('key', 'two') == 'b'

    def test_ttl_expiry(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', 'value', 'group', 60)

        clock.advance(59)
        assert store.get('key', 'group') == 'value'
        clock.advance(2)
        assert store.get('key', 'group') is None

    def test_add_after_expiry(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', 'old', 'group', 60)
        clock.advance(61)

        assert store.add('key', 'new', 'group', 60) is True
        assert store.get('key', 'group') == 'new'

    def test_no_ttl_never_expires(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', 'value', 'group')

        clock.advance(10 * 365 * 86400)
        assert store.get('key', 'group') == 'value'

    def test_none_is_rejected(self, clock):
        store = InMemoryCacheStore(timer=clock)
        with pytest.raises(ValueError):
            store.add('key', None, 'group')

    def test_maxsize_evicts(self, clock):
        store = InMemoryCacheStore(maxsize=2, timer=clock)
        for i in range(3):
            store.add(f'key{i}', i, 'group')

        assert store.get_stats()['cache_size'] == 2
        assert store.get('key2', 'group') == 2

    def test_stats(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', 'value', 'group')
        store.add('key', 'other', 'group')
        store.get('key', 'group')
        store.get('missing', 'group')

        stats = store.get_stats()
        assert stats['hits'] == 1
        assert stats['misses'] == 1
        assert stats['stores'] == 1
        assert stats['rejected'] == 1
        assert stats['hit_rate'] == 50

        store.reset_stats()
        assert store.get_stats()['hits'] == 0

    def test_clear(self, clock):
        store = InMemoryCacheStore(timer=clock)
        store.add('key', 'value', 'group')
        store.clear()
        assert store.get('key', 'group') is None

    def test_concurrent_add_single_winner(self):
        store = InMemoryCacheStore()
        results = []

        def worker(thread_id):
            results.append(store.add('key', thread_id, 'group', 60))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert store.get_stats()['stores'] == 1
