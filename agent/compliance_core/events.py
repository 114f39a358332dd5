"""
EventNotifier — fire-and-forget notifications for the presentation layer.

Subscribers are called synchronously on the scheduler thread with
``(event_name, payload)``. A subscriber that raises is logged and skipped;
it never affects the scheduler or the other subscribers.
"""

import threading

from .config import log


class EventNotifier:

    def __init__(self):
        self._subscribers = []
        self._lock = threading.Lock()

    def subscribe(self, callback):
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback):
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def emit(self, event, payload=None):
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event, payload)
            except Exception as e:
                log.warning("Event subscriber %r failed on %s: %s", callback, event, e)
