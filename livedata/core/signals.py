"""Cache lifecycle events published by the refresh orchestrator."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable

from .streams import Subscription, call_on_loop

logger = logging.getLogger(__name__)

REFRESH_STARTED = "cache:refresh_started"
REFRESHED = "cache:refreshed"  # value=<new cached string>
FETCH_FAILED = "cache:fetch_failed"  # error=<FetchFailed>

Listener = Callable[..., None]


class SignalBus:
    """Delivers cache events to listeners on one event loop.

    Listeners are called as ``listener(signal, **data)`` on the loop thread,
    whichever thread emitted. A listener that raises is logged and skipped.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop
        self._listeners: dict[str, list[Listener]] = {}
        self._lock = threading.Lock()

    def on(self, signal: str, listener: Listener) -> Subscription:
        """Listen for *signal* until the returned handle is disposed."""
        with self._lock:
            self._listeners.setdefault(signal, []).append(listener)

        def remove() -> None:
            with self._lock:
                listeners = self._listeners.get(signal, [])
                if listener in listeners:
                    listeners.remove(listener)

        return Subscription(remove, name=f"{signal} listener")

    def emit(self, signal: str, **data) -> None:
        with self._lock:
            listeners = list(self._listeners.get(signal, ()))
        if listeners:
            call_on_loop(self._loop, self._deliver, signal, listeners, data)

    def _deliver(self, signal: str, listeners: list[Listener], data: dict) -> None:
        for listener in listeners:
            try:
                listener(signal, **data)
            except Exception:
                logger.exception("Listener for %r failed", signal)
