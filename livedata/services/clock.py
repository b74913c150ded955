"""Clock stream: the current time, once per interval."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable

from ..core.time_service import current_millis

logger = logging.getLogger(__name__)

# Time units between clock emissions
CLOCK_INTERVAL = 1


async def produce_time(
    *,
    interval: float = CLOCK_INTERVAL,
    clock: Callable[[], int] = current_millis,
) -> AsyncIterator[int]:
    """Yield ``clock()`` immediately, then again every *interval* seconds.

    Runs until the consumer stops iterating; closing the generator cancels
    the pending sleep.
    """
    logger.debug("Clock stream started (interval=%ss)", interval)
    try:
        while True:
            yield clock()
            await asyncio.sleep(interval)
    finally:
        logger.debug("Clock stream stopped")
