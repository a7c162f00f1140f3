"""Unit tests for fetching.events module"""

from unittest.mock import Mock

import pytest

from remotefetch.fetching import EventDispatcher


class TestEventDispatcher:
    """Test suite for EventDispatcher class"""

    def test_dispatch_in_order(self):
        dispatcher = EventDispatcher()
        calls = []
        dispatcher.subscribe('remote_request_success', lambda url, r: calls.append(('a', url)))
        dispatcher.subscribe('remote_request_success', lambda url, r: calls.append(('b', url)))

        dispatcher.dispatch('remote_request_success', 'https://example.com', None)

        assert calls == [('a', 'https://example.com'), ('b', 'https://example.com')]

    def test_events_are_separate(self):
        dispatcher = EventDispatcher()
        listener = Mock()
        dispatcher.subscribe('remote_request_error', listener)

        dispatcher.dispatch('remote_request_success', 'https://example.com', None)

        listener.assert_not_called()

    def test_unknown_event(self):
        with pytest.raises(ValueError):
            EventDispatcher().subscribe('something_else', Mock())

    def test_unsubscribe(self):
        dispatcher = EventDispatcher()
        listener = Mock()
        dispatcher.subscribe('remote_request_error', listener)
        dispatcher.unsubscribe('remote_request_error', listener)
        dispatcher.unsubscribe('remote_request_error', listener)

        dispatcher.dispatch('remote_request_error', 'https://example.com', None)

        listener.assert_not_called()

    def test_failing_callback_does_not_stop_others(self, caplog):
        dispatcher = EventDispatcher()
        listener = Mock()
        dispatcher.subscribe('remote_request_error', Mock(side_effect=RuntimeError('boom')))
        dispatcher.subscribe('remote_request_error', listener)

        dispatcher.dispatch('remote_request_error', 'https://example.com', 'error')

        listener.assert_called_once_with('https://example.com', 'error')
        assert 'boom' in caplog.text
