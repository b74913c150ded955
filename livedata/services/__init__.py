"""Value producers: clock, weather rotation and the simulated fetch."""

from .clock import CLOCK_INTERVAL, produce_time
from .fetch import FETCH_DELAY, RESULT_TEMPLATE, SlowFetchSimulator
from .weather import WEATHER_CONDITIONS, WEATHER_INTERVAL, condition_at, produce_weather

__all__ = [
    # Clock
    "CLOCK_INTERVAL",
    "produce_time",
    # Weather
    "WEATHER_CONDITIONS",
    "WEATHER_INTERVAL",
    "condition_at",
    "produce_weather",
    # Fetch
    "FETCH_DELAY",
    "RESULT_TEMPLATE",
    "SlowFetchSimulator",
]
