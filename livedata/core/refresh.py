"""Drives cache refreshes and decides where the slow fetch runs."""

from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import Executor
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Union

from ..errors import FetchFailed
from .signals import FETCH_FAILED, REFRESH_STARTED, REFRESHED

if TYPE_CHECKING:
    from .cache import CachedValueStore
    from .signals import SignalBus

logger = logging.getLogger(__name__)

Fetcher = Union[Callable[[], Awaitable[str]], Callable[[], str]]


class RefreshOrchestrator:
    """Runs a fetcher and feeds its result into a ``CachedValueStore``.

    By default the fetcher is called on the loop and its result awaited when
    it is awaitable. With ``blocking=True`` it runs in *executor* (the default
    thread pool when None) instead. Either way the result is written back on
    the loop that notifies observers.
    """

    def __init__(
        self,
        store: CachedValueStore,
        fetcher: Fetcher,
        *,
        blocking: bool = False,
        executor: Optional[Executor] = None,
        bus: Optional[SignalBus] = None,
    ):
        self.store = store
        self._fetcher = fetcher
        self.blocking = blocking
        self._executor = executor
        self._bus = bus
        self.completed = 0
        self.failed = 0

    async def refresh(self) -> str:
        """Run one loading-then-result sequence on the store.

        Raises:
            FetchFailed: If the fetcher fails (after the signal is emitted)
        """
        self._emit(REFRESH_STARTED)
        try:
            value = await self.store.refresh(self._fetch)
        except FetchFailed as exc:
            self.failed += 1
            logger.warning("Refresh failed, keeping %r: %s", self.store.value, exc)
            self._emit(FETCH_FAILED, error=exc)
            raise
        self.completed += 1
        logger.info("Refresh #%d complete: %s", self.completed, value)
        self._emit(REFRESHED, value=value)
        return value

    async def _fetch(self) -> str:
        if self.blocking:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(self._executor, self._fetcher)
        else:
            result = self._fetcher()
            if inspect.isawaitable(result):
                result = await result
        if not isinstance(result, str):
            raise FetchFailed(f"Fetcher returned {type(result).__name__}, expected str")
        return result

    def _emit(self, signal: str, **data) -> None:
        if self._bus is not None:
            self._bus.emit(signal, **data)
