"""Cold async streams with explicit subscription handles.

A ``Stream`` wraps a zero-argument async-generator function. Every iteration
or subscription calls it again, so each observer gets its own producer loop.
Subscribing returns a ``Subscription``; disposing it cancels the producer task
and closes the generator, which releases any pending sleep.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import aclosing
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_VALUE = "value"
_ERROR = "error"
_DONE = "done"


def on_loop_thread(loop: asyncio.AbstractEventLoop) -> bool:
    """Return True if the caller is running inside *loop*."""
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


def call_on_loop(loop: asyncio.AbstractEventLoop, callback: Callable[..., Any], *args: Any) -> None:
    """Run *callback* inline when already on *loop*, otherwise schedule it there."""
    if on_loop_thread(loop):
        callback(*args)
    else:
        loop.call_soon_threadsafe(callback, *args)


class Subscription:
    """Handle returned by every ``subscribe`` call.

    ``dispose()`` is idempotent and safe to call from any thread. Once it
    returns, the subscriber's callback is not invoked again.
    """

    def __init__(self, cancel: Callable[[], None], name: str = "subscription"):
        self.name = name
        self._cancel = cancel
        self._disposed = False
        self._lock = threading.Lock()
        self._task: Optional[asyncio.Task] = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop delivery and release the producer."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
        self._cancel()
        logger.debug("Disposed %s", self.name)

    async def wait_closed(self) -> None:
        """Wait until the producer task (if any) has finished."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()


class Stream(Generic[T]):
    """A cold, possibly infinite sequence of values produced over time."""

    def __init__(self, factory: Callable[[], AsyncIterator[T]], name: str = "stream"):
        self._factory = factory
        self.name = name

    def __repr__(self) -> str:
        return f"Stream({self.name!r})"

    def iterate(self) -> AsyncIterator[T]:
        """Start a fresh producer and return its async generator."""
        return self._factory()

    def __aiter__(self) -> AsyncIterator[T]:
        return self.iterate()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, *values: T) -> "Stream[T]":
        """Stream that yields *values* then completes."""

        async def produce():
            for value in values:
                yield value

        return cls(produce, name=f"of{values!r}")

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(
        self,
        on_next: Callable[[T], None],
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> Subscription:
        """Run the producer on the current event loop and deliver each value.

        Must be called from a coroutine or callback running on the loop.
        """
        loop = asyncio.get_running_loop()
        task_ref: list[asyncio.Task] = []

        def cancel() -> None:
            if task_ref:
                call_on_loop(loop, task_ref[0].cancel)

        subscription = Subscription(cancel, name=f"{self.name} subscription")

        async def pump() -> None:
            try:
                async with aclosing(self.iterate()) as values:
                    async for value in values:
                        if subscription.disposed:
                            break
                        try:
                            on_next(value)
                        except Exception:
                            logger.exception("Subscriber to %r failed", self.name)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                if on_error is None:
                    logger.exception("Stream %r failed", self.name)
                else:
                    on_error(exc)

        task = loop.create_task(pump(), name=subscription.name)
        task_ref.append(task)
        subscription._task = task
        return subscription

    async def take(self, count: int) -> list[T]:
        """Collect the first *count* values, then close the producer."""
        result: list[T] = []
        if count <= 0:
            return result
        async with aclosing(self.iterate()) as values:
            async for value in values:
                result.append(value)
                if len(result) >= count:
                    break
        return result

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def map(self, fn: Callable[[T], R]) -> "Stream[R]":
        """Apply *fn* to every value."""
        source = self

        async def produce():
            async with aclosing(source.iterate()) as values:
                async for value in values:
                    yield fn(value)

        return Stream(produce, name=f"{self.name}.map")

    def switch_map(self, transform: Callable[[T], Awaitable[R]]) -> "Stream[R]":
        """Run an async *transform* per value, dropping stale in-flight ones.

        When a new upstream value arrives while the previous transform is
        still running, the previous one is cancelled and never emitted.
        """
        source = self

        async def produce():
            queue: asyncio.Queue = asyncio.Queue()
            pending: Optional[asyncio.Task] = None

            async def run(value: T) -> None:
                try:
                    result = await transform(value)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    queue.put_nowait((_ERROR, exc))
                else:
                    queue.put_nowait((_VALUE, result))

            async def pump() -> None:
                nonlocal pending
                try:
                    async with aclosing(source.iterate()) as values:
                        async for value in values:
                            if pending is not None and not pending.done():
                                pending.cancel()
                            pending = asyncio.create_task(run(value))
                    if pending is not None:
                        await asyncio.wait([pending])
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    queue.put_nowait((_ERROR, exc))
                    return
                queue.put_nowait((_DONE, None))

            pumper = asyncio.create_task(pump())
            try:
                while True:
                    kind, payload = await queue.get()
                    if kind == _DONE:
                        return
                    if kind == _ERROR:
                        raise payload
                    yield payload
            finally:
                pumper.cancel()
                if pending is not None:
                    pending.cancel()

        return Stream(produce, name=f"{self.name}.switch_map")


def concat(*streams: Stream[T], name: Optional[str] = None) -> Stream[T]:
    """Yield every value of each stream in order.

    ``concat(Stream.of(placeholder), source)`` emits the placeholder first and
    then forwards everything *source* produces.
    """

    async def produce():
        for stream in streams:
            async with aclosing(stream.iterate()) as values:
                async for value in values:
                    yield value

    return Stream(produce, name=name or "+".join(s.name for s in streams))
