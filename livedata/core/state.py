"""Single observable value with ordered, push-based notification."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

from .streams import Stream, Subscription, call_on_loop, on_loop_thread

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ObservableValue(Generic[T]):
    """
    Read side of a single value that observers can watch.

    Holds exactly one value at all times. Observers are notified on every
    write, in the order writes were committed.
    """

    def __init__(self, initial: T, loop: Optional[asyncio.AbstractEventLoop] = None, name: str = "value"):
        self.name = name
        self._value = initial
        self._version = 0
        self._observers: list[Callable[[T], None]] = []
        self._lock = threading.RLock()  # Reentrant: observers may read during notify
        self._loop = loop

    @property
    def value(self) -> T:
        """Current value."""
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        """Number of writes committed so far."""
        with self._lock:
            return self._version

    def subscribe(self, callback: Callable[[T], None], emit_current: bool = False) -> Subscription:
        """
        Subscribe to writes.

        Args:
            callback: Called with each new value
            emit_current: Also call back immediately with the current value

        Returns:
            Subscription whose ``dispose()`` stops delivery
        """
        with self._lock:
            self._observers.append(callback)
            if emit_current:
                self._notify_one(callback, self._value)

        def unsubscribe():
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return Subscription(unsubscribe, name=f"{self.name} observer")

    def observe(self) -> Stream[T]:
        """Stream of the current value followed by every later write."""

        async def produce():
            loop = asyncio.get_running_loop()
            queue: asyncio.Queue = asyncio.Queue()

            def push(value: T) -> None:
                call_on_loop(loop, queue.put_nowait, value)

            subscription = self.subscribe(push, emit_current=True)
            try:
                while True:
                    yield await queue.get()
            finally:
                subscription.dispose()

        return Stream(produce, name=self.name)

    def _commit(self, value: T) -> None:
        # Notify under the lock so observers see writes in commit order.
        with self._lock:
            self._value = value
            self._version += 1
            observers = self._observers.copy()
            for observer in observers:
                self._notify_one(observer, value)

    def _notify_one(self, observer: Callable[[T], None], value: T) -> None:
        try:
            observer(value)
        except Exception:
            logger.exception("Observer failed for %r", self.name)


class MutableObservableValue(ObservableValue[T]):
    """Observable value that its owner can write to."""

    def set_value(self, value: T) -> None:
        """Write synchronously and notify observers in the caller's context."""
        self._commit(value)

    def post_value(self, value: T) -> None:
        """Write from any thread; marshalled onto the bound loop when there is one."""
        if self._loop is None or on_loop_thread(self._loop):
            self._commit(value)
        else:
            call_on_loop(self._loop, self._commit, value)

    def as_readonly(self) -> ObservableValue[T]:
        """Expose this value without its write methods."""
        return _ReadOnlyView(self)


class _ReadOnlyView(ObservableValue[T]):
    """Delegating view that hides the writer."""

    def __init__(self, target: ObservableValue[T]):
        self._target = target
        self.name = target.name

    @property
    def value(self) -> T:
        return self._target.value

    @property
    def version(self) -> int:
        return self._target.version

    def subscribe(self, callback: Callable[[T], None], emit_current: bool = False) -> Subscription:
        return self._target.subscribe(callback, emit_current=emit_current)

    def observe(self) -> Stream[T]:
        return self._target.observe()
