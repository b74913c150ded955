"""Weather stream: a fixed rotation of conditions on a timer."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Sequence

logger = logging.getLogger(__name__)

WEATHER_CONDITIONS = ("Sunny", "Cloudy", "Rainy", "Stormy", "Snowy")

# Time units between weather emissions
WEATHER_INTERVAL = 2


def condition_at(emission: int, conditions: Sequence[str] = WEATHER_CONDITIONS) -> str:
    """Condition yielded as the *emission*-th value (0-based) of a fresh stream.

    The rotation counter is incremented before indexing, so the first value
    is ``conditions[1]``.
    """
    return conditions[(emission + 1) % len(conditions)]


async def produce_weather(
    *,
    interval: float = WEATHER_INTERVAL,
    conditions: Sequence[str] = WEATHER_CONDITIONS,
) -> AsyncIterator[str]:
    """Wait *interval* seconds, then yield the next condition, forever."""
    if not conditions:
        raise ValueError("conditions must not be empty")

    counter = 0
    logger.debug("Weather stream started (interval=%ss)", interval)
    try:
        while True:
            counter += 1
            await asyncio.sleep(interval)
            yield conditions[counter % len(conditions)]
    finally:
        logger.debug("Weather stream stopped after %d ticks", counter)
