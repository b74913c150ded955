"""Cached value store with a serialized loading-then-result refresh."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..errors import FetchFailed
from .state import MutableObservableValue, ObservableValue
from .streams import Stream, Subscription

logger = logging.getLogger(__name__)

DEFAULT_CACHED_VALUE = "This is old data"
LOADING_MARKER = "Fetching new data..."


class CachedValueStore:
    """
    Holds one string, readable by any number of observers.

    The only way to change it is ``refresh()``, which writes the loading
    marker, awaits the fetch, then writes the fetched result. Refreshes are
    serialized: a second caller waits until the first pair of writes is done.
    """

    def __init__(
        self,
        initial: str = DEFAULT_CACHED_VALUE,
        *,
        loading: str = LOADING_MARKER,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.loading = loading
        self._value = MutableObservableValue(initial, loop=loop, name="cached_value")
        self._refresh_lock = asyncio.Lock()
        self._last_good = initial

    @property
    def value(self) -> str:
        return self._value.value

    @property
    def cached_value(self) -> ObservableValue[str]:
        """Read-only observable view of the cached string."""
        return self._value.as_readonly()

    @property
    def refreshing(self) -> bool:
        return self._refresh_lock.locked()

    def subscribe(self, callback: Callable[[str], None], emit_current: bool = False) -> Subscription:
        return self._value.subscribe(callback, emit_current=emit_current)

    def observe(self) -> Stream[str]:
        """Current value followed by every later write."""
        return self._value.observe()

    async def refresh(self, fetch: Callable[[], Awaitable[str]]) -> str:
        """
        Replace the cached value with the result of *fetch*.

        Args:
            fetch: Coroutine function producing the new value

        Returns:
            The value written after the loading marker

        Raises:
            FetchFailed: If *fetch* fails; the last good value is restored first
        """
        async with self._refresh_lock:
            self._value.set_value(self.loading)
            try:
                result = await fetch()
            except FetchFailed:
                self._value.set_value(self._last_good)
                raise
            except asyncio.CancelledError:
                self._value.set_value(self._last_good)
                raise
            except Exception as exc:
                self._value.set_value(self._last_good)
                raise FetchFailed(f"Fetch for {self._value.name!r} failed: {exc}") from exc

            self._value.set_value(result)
            self._last_good = result
            logger.debug("Cached value refreshed: %s", result)
            return result
