"""Core primitives - streams, observable state, the cache store and signals."""

from .streams import Stream, Subscription, concat
from .state import MutableObservableValue, ObservableValue
from .signals import FETCH_FAILED, REFRESH_STARTED, REFRESHED, SignalBus
from .time_service import DISPLAY_FORMAT, current_millis, format_timestamp
from .cache import DEFAULT_CACHED_VALUE, LOADING_MARKER, CachedValueStore
from .refresh import RefreshOrchestrator

__all__ = [
    # Streams
    "Stream",
    "Subscription",
    "concat",
    # State
    "ObservableValue",
    "MutableObservableValue",
    # Signals
    "SignalBus",
    "REFRESH_STARTED",
    "REFRESHED",
    "FETCH_FAILED",
    # Time
    "DISPLAY_FORMAT",
    "current_millis",
    "format_timestamp",
    # Cache
    "CachedValueStore",
    "DEFAULT_CACHED_VALUE",
    "LOADING_MARKER",
    "RefreshOrchestrator",
]
