"""Exceptions raised by livedata."""


class LiveDataError(Exception):
    """Base class for livedata errors."""


class FetchFailed(LiveDataError):
    """A cache refresh could not obtain new data.

    The cache keeps its last good value when this is raised.
    """


class ConfigError(LiveDataError, ValueError):
    """A configuration value is out of range or unknown."""
