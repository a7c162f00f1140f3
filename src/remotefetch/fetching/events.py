"""
Notification of remote request outcomes.

External observers (metrics, logging) subscribe callbacks to an
EventDispatcher that is injected into the cached fetcher. Dispatching is
fire-and-forget: return values are ignored and a failing callback never
changes what the fetcher returns.
"""

import logging
from typing import Any, Callable, Dict, List

from .constants import EVENT_REQUEST_SUCCESS, EVENT_REQUEST_ERROR

logger = logging.getLogger(__name__)

KNOWN_EVENTS = (EVENT_REQUEST_SUCCESS, EVENT_REQUEST_ERROR)

EventCallback = Callable[[str, Any], None]


class EventDispatcher:
    """Ordered list of callbacks per event name."""

    def __init__(self):
        self.callbacks: Dict[str, List[EventCallback]] = {name: [] for name in KNOWN_EVENTS}

    def subscribe(self, event: str, callback: EventCallback) -> None:
        """Register callback(url, response) for event."""
        if event not in self.callbacks:
            raise ValueError(f'Unknown event {event}, expected one of {KNOWN_EVENTS}')
        logger.debug('Registering callback %r for %s', callback, event)
        self.callbacks[event].append(callback)

    def unsubscribe(self, event: str, callback: EventCallback) -> None:
        """Remove a previously registered callback. Unknown callbacks are ignored."""
        try:
            self.callbacks.get(event, []).remove(callback)
        except ValueError:
            logger.debug('Callback %r was not registered for %s', callback, event)

    def dispatch(self, event: str, url: str, response: Any) -> None:
        """Call every callback registered for event with (url, response)."""
        for callback in list(self.callbacks.get(event, [])):
            try:
                callback(url, response)
            except Exception:  # pylint: disable=broad-except
                logger.exception('Callback %r for %s raised', callback, event)
