"""Request context: cancellation flag plus optional deadline."""

import logging
import threading
import time

from . import config
from .errors import CancelledError

log = logging.getLogger(__name__)


class Context:
    """Carried through every network call.

    ``timeout`` (seconds) fixes an absolute deadline at construction.
    ``cancel()`` may be called from any thread; the next ``check()`` raises
    and every registered cancel callback runs once.
    """

    def __init__(self, timeout: float = None):
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks = {}
        self._next_key = 0

    def cancel(self):
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()
        for callback in callbacks:
            try:
                callback()
            except Exception:
                log.exception("Cancel callback %r failed", callback)

    def on_cancel(self, callback):
        """Run ``callback`` when the context is cancelled; return an unregister function.

        Already cancelled: the callback runs immediately.
        """
        with self._lock:
            if not self._cancelled.is_set():
                key = self._next_key
                self._next_key += 1
                self._callbacks[key] = callback
                return lambda: self._unregister(key)
        callback()
        return lambda: None

    def _unregister(self, key):
        with self._lock:
            self._callbacks.pop(key, None)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def check(self):
        if self._cancelled.is_set():
            raise CancelledError("Context cancelled")
        left = self.remaining()
        if left is not None and left <= 0:
            raise CancelledError("Context deadline exceeded")

    def timeout(self):
        """Per-request timeout for requests, capped by the time left."""
        self.check()
        left = self.remaining()
        if left is None:
            return (config.CONNECT_TIMEOUT, config.READ_TIMEOUT)
        return (min(config.CONNECT_TIMEOUT, left), min(config.READ_TIMEOUT, left))


def background() -> Context:
    """A context that is never cancelled and has no deadline."""
    return Context()
