"""Runtime settings loaded from an optional JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("livedata.json")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LiveDataConfig:
    """Settings for the demo.

    The stream intervals are fixed in time units; ``time_unit`` only sets
    how many seconds one unit lasts.
    """
    time_unit: float = 1.0  # seconds
    timezone: str = ""  # empty = local time
    log_level: str = "INFO"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "LiveDataConfig":
        if not isinstance(d, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})

    def validate(self) -> "LiveDataConfig":
        """Check values, returning self.

        Raises:
            ConfigError: If any value is unusable
        """
        try:
            unit = float(self.time_unit)
        except (TypeError, ValueError):
            raise ConfigError(f"time_unit must be a number, got {self.time_unit!r}") from None
        if unit <= 0:
            raise ConfigError(f"time_unit must be positive, got {self.time_unit!r}")
        self.time_unit = unit

        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ConfigError(f"Unknown timezone: {self.timezone!r}") from None

        level = str(self.log_level).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level!r}")
        self.log_level = level
        return self

    def save(self, path: Path = CONFIG_PATH) -> None:
        temp = path.with_suffix(".tmp")
        temp.write_text(json.dumps(self.to_dict(), indent=2))
        temp.rename(path)

    @classmethod
    def load(cls, path: Path = CONFIG_PATH) -> "LiveDataConfig":
        """Read *path*, falling back to defaults when missing or unreadable."""
        try:
            if path.exists():
                return cls.from_dict(json.loads(path.read_text()))
        except (json.JSONDecodeError, UnicodeDecodeError, IOError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
        return cls()
