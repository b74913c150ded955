"""Data source interface and the default in-process implementation."""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Callable, Optional, Protocol

from .core.cache import DEFAULT_CACHED_VALUE, CachedValueStore
from .core.refresh import Fetcher, RefreshOrchestrator
from .core.signals import SignalBus
from .core.state import ObservableValue
from .core.streams import Stream
from .core.time_service import current_millis
from .services.clock import CLOCK_INTERVAL, produce_time
from .services.fetch import FETCH_DELAY, SlowFetchSimulator
from .services.weather import WEATHER_CONDITIONS, WEATHER_INTERVAL, produce_weather

logger = logging.getLogger(__name__)


class DataSource(Protocol):
    """What the presentation layer consumes."""

    @property
    def cached_data(self) -> ObservableValue[str]:
        """Observable cached string."""
        ...

    def observe_current_time(self) -> Stream[int]:
        """Millisecond timestamps, one per clock interval."""
        ...

    def observe_weather(self) -> Stream[str]:
        """Rotating weather conditions, one per weather interval."""
        ...

    def observe_cached_value(self) -> Stream[str]:
        """Current cached string followed by every later write."""
        ...

    async def refresh(self) -> None:
        """Refresh the cached string through a slow fetch."""
        ...


class DefaultDataSource(DataSource):
    """Clock and weather streams plus one refreshable cached string.

    All fixed intervals are multiplied by *time_unit* (seconds).
    """

    def __init__(
        self,
        *,
        time_unit: float = 1.0,
        clock: Callable[[], int] = current_millis,
        fetcher: Optional[Fetcher] = None,
        blocking: bool = False,
        executor: Optional[Executor] = None,
        bus: Optional[SignalBus] = None,
        initial: str = DEFAULT_CACHED_VALUE,
    ):
        self.time_unit = time_unit
        self._clock = clock
        self.simulator: Optional[SlowFetchSimulator] = None
        if fetcher is None:
            self.simulator = SlowFetchSimulator(delay=FETCH_DELAY * time_unit)
            fetcher = self.simulator.fetch

        self._store = CachedValueStore(initial)
        self.orchestrator = RefreshOrchestrator(
            self._store, fetcher, blocking=blocking, executor=executor, bus=bus
        )
        logger.debug("DefaultDataSource created (time_unit=%ss)", time_unit)

    @property
    def cached_data(self) -> ObservableValue[str]:
        return self._store.cached_value

    @property
    def store(self) -> CachedValueStore:
        return self._store

    def observe_current_time(self) -> Stream[int]:
        interval = CLOCK_INTERVAL * self.time_unit
        clock = self._clock
        return Stream(lambda: produce_time(interval=interval, clock=clock), name="current_time")

    def observe_weather(self) -> Stream[str]:
        interval = WEATHER_INTERVAL * self.time_unit
        return Stream(
            lambda: produce_weather(interval=interval, conditions=WEATHER_CONDITIONS),
            name="weather",
        )

    def observe_cached_value(self) -> Stream[str]:
        return self._store.observe()

    async def refresh(self) -> None:
        await self.orchestrator.refresh()
