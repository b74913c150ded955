"""Shared test fixtures."""

import itertools

import pytest

from livedata.core.cache import CachedValueStore
from livedata.data_source import DefaultDataSource

# Seconds per time unit in tests: clock ticks every 10ms, weather every 20ms,
# the simulated fetch takes 30ms.
FAST_UNIT = 0.01


@pytest.fixture
def time_unit():
    return FAST_UNIT


@pytest.fixture
def fake_clock():
    """Monotonic fake clock returning 1000, 1001, 1002, ..."""
    counter = itertools.count(1000)
    return lambda: next(counter)


@pytest.fixture
def data_source(time_unit, fake_clock):
    """DefaultDataSource running on the fast time unit."""
    return DefaultDataSource(time_unit=time_unit, clock=fake_clock)


@pytest.fixture
def store():
    return CachedValueStore()


@pytest.fixture
def recorder():
    """Callable that records every value it is called with."""

    class Recorder:
        def __init__(self):
            self.values = []

        def __call__(self, value):
            self.values.append(value)

    return Recorder()
