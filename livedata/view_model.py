"""Presentation adapter: the streams a UI binds to, plus the refresh trigger."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import LiveDataConfig
from .core.signals import SignalBus
from .core.streams import Stream, concat
from .core.time_service import format_timestamp
from .data_source import DataSource, DefaultDataSource

logger = logging.getLogger(__name__)

# Shown before the first weather reading arrives
LOADING_STRING = "Loading..."

# Time units the timestamp formatting is made to take
FORMAT_DELAY = 0.5


class LiveDataViewModel:
    """Exposes data-source streams in display-ready form.

    Attributes:
        current_time: Raw millisecond timestamps
        current_time_transformed: Human-readable times; a slow format that is
            overtaken by a newer timestamp is dropped
        current_weather: ``LOADING_STRING`` then the weather rotation
        cached_value: The data source's cached string
    """

    def __init__(self, data_source: DataSource, *, time_unit: float = 1.0, timezone: Optional[str] = None):
        self.data_source = data_source
        self.time_unit = time_unit
        self.timezone = timezone or None
        self._tasks: set[asyncio.Task] = set()

        self.current_time: Stream[int] = data_source.observe_current_time()
        self.current_time_transformed: Stream[str] = self.current_time.switch_map(self.timestamp_to_time)
        self.current_weather: Stream[str] = concat(
            Stream.of(LOADING_STRING), data_source.observe_weather(), name="current_weather"
        )
        self.cached_value: Stream[str] = data_source.observe_cached_value()

    async def timestamp_to_time(self, timestamp: int) -> str:
        """Format *timestamp*, simulating an expensive computation."""
        await asyncio.sleep(FORMAT_DELAY * self.time_unit)
        return format_timestamp(timestamp, self.timezone)

    def on_refresh(self) -> asyncio.Task:
        """Start a cache refresh in the background (user pressed "fetch")."""
        task = asyncio.get_running_loop().create_task(self.data_source.refresh(), name="refresh")
        self._tasks.add(task)
        task.add_done_callback(self._on_refresh_done)
        return task

    def _on_refresh_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background refresh failed: %s", exc)

    @property
    def pending_refreshes(self) -> int:
        return len(self._tasks)

    async def close(self) -> None:
        """Cancel refreshes that are still running."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


def create_view_model(
    config: Optional[LiveDataConfig] = None,
    *,
    bus: Optional[SignalBus] = None,
) -> LiveDataViewModel:
    """Build a default data source and the view model bound to it."""
    config = config or LiveDataConfig()
    config.validate()
    data_source = DefaultDataSource(time_unit=config.time_unit, bus=bus)
    return LiveDataViewModel(data_source, time_unit=config.time_unit, timezone=config.timezone)
