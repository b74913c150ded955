"""Timestamp helpers shared by the clock stream and the view model."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

# e.g. "Mon Oct 19 14:03:07 UTC 2026"
DISPLAY_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


def current_millis() -> int:
    """Wall-clock milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def format_timestamp(timestamp: int, timezone: Optional[str] = None) -> str:
    """
    Render a millisecond timestamp for display.

    Args:
        timestamp: Milliseconds since the Unix epoch
        timezone: IANA zone name (e.g. "Europe/London"); local time when empty

    Raises:
        ZoneInfoNotFoundError: If timezone is invalid
    """
    seconds = timestamp / 1000
    if timezone:
        moment = datetime.fromtimestamp(seconds, ZoneInfo(timezone))
    else:
        moment = datetime.fromtimestamp(seconds).astimezone()
    return moment.strftime(DISPLAY_FORMAT)
