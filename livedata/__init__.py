"""Observable clock, weather and cached-value streams on asyncio."""

from .config import LiveDataConfig
from .core import (
    DEFAULT_CACHED_VALUE,
    LOADING_MARKER,
    CachedValueStore,
    MutableObservableValue,
    ObservableValue,
    RefreshOrchestrator,
    SignalBus,
    Stream,
    Subscription,
    concat,
)
from .data_source import DataSource, DefaultDataSource
from .errors import ConfigError, FetchFailed, LiveDataError
from .services import WEATHER_CONDITIONS, SlowFetchSimulator
from .view_model import LOADING_STRING, LiveDataViewModel, create_view_model

__all__ = [
    "LiveDataConfig",
    "CachedValueStore",
    "DEFAULT_CACHED_VALUE",
    "LOADING_MARKER",
    "MutableObservableValue",
    "ObservableValue",
    "RefreshOrchestrator",
    "SignalBus",
    "Stream",
    "Subscription",
    "concat",
    "DataSource",
    "DefaultDataSource",
    "LiveDataError",
    "FetchFailed",
    "ConfigError",
    "WEATHER_CONDITIONS",
    "SlowFetchSimulator",
    "LOADING_STRING",
    "LiveDataViewModel",
    "create_view_model",
]
