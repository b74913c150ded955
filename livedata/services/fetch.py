"""Simulated slow network/disk fetch used to refresh the cache."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)

# Time units the simulated request takes
FETCH_DELAY = 3

RESULT_TEMPLATE = "New data from request #{}"


class SlowFetchSimulator:
    """Stands in for a remote data source.

    Each call sleeps, bumps a private counter and returns a distinct string.
    It never fails; a real replacement should raise ``FetchFailed``.
    """

    def __init__(self, delay: float = FETCH_DELAY):
        self.delay = delay
        self._counter = 0

    @property
    def requests_made(self) -> int:
        return self._counter

    async def fetch(self) -> str:
        await asyncio.sleep(self.delay)
        self._counter += 1
        logger.debug("Simulated request #%d finished", self._counter)
        return RESULT_TEMPLATE.format(self._counter)
