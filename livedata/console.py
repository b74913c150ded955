"""Console presenter - prints every stream the view model exposes."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from .config import CONFIG_PATH, LiveDataConfig
from .core.signals import FETCH_FAILED, SignalBus
from .core.streams import Subscription
from .errors import ConfigError
from .view_model import LiveDataViewModel, create_view_model

logger = logging.getLogger(__name__)


class ConsolePresenter:
    """Binds a view model to line-oriented output."""

    def __init__(self, view_model: LiveDataViewModel, out: Optional[TextIO] = None):
        self.view_model = view_model
        self._out = out
        self._subscriptions: list[Subscription] = []

    def _printer(self, label: str) -> Callable[[object], None]:
        def show(value: object) -> None:
            print(f"[{label}] {value}", file=self.out, flush=True)
        return show

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def start(self) -> None:
        """Subscribe to all streams. Must run on the event loop."""
        vm = self.view_model
        self._subscriptions = [
            vm.current_time.subscribe(self._printer("time")),
            vm.current_time_transformed.subscribe(self._printer("clock")),
            vm.current_weather.subscribe(self._printer("weather")),
            vm.cached_value.subscribe(self._printer("cache")),
        ]

    async def stop(self) -> None:
        for sub in self._subscriptions:
            sub.dispose()
        for sub in self._subscriptions:
            await sub.wait_closed()
        self._subscriptions = []
        await self.view_model.close()

    async def run(self, duration: float, refresh_every: Optional[float] = None) -> None:
        """Show the streams for *duration* seconds, refreshing periodically.

        Raises:
            ValueError: If *refresh_every* is not positive
        """
        if refresh_every is not None and refresh_every <= 0:
            raise ValueError(f"refresh_every must be positive, got {refresh_every!r}")
        self.start()
        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration
        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                if refresh_every is None:
                    await asyncio.sleep(remaining)
                    continue
                await asyncio.sleep(min(refresh_every, remaining))
                if loop.time() < deadline:
                    self.view_model.on_refresh()
        finally:
            await self.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="livedata", description="Print live clock, weather and cache streams.")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="JSON settings file")
    parser.add_argument("--time-unit", type=float, help="seconds per time unit (overrides config)")
    parser.add_argument("--timezone", help="IANA zone for formatted times (overrides config)")
    parser.add_argument("--duration", type=float, default=10.0, help="seconds to run")
    parser.add_argument("--refresh-every", type=float, default=None, help="seconds between cache refreshes")
    parser.add_argument("--log-level", help="logging level (overrides config)")
    return parser


async def _run(config: LiveDataConfig, duration: float, refresh_every: Optional[float]) -> None:
    bus = SignalBus(asyncio.get_running_loop())
    bus.on(FETCH_FAILED, lambda signal, error: logger.error("Cache refresh failed: %s", error))
    presenter = ConsolePresenter(create_view_model(config, bus=bus))
    await presenter.run(duration, refresh_every)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for ``python -m livedata``."""
    args = build_parser().parse_args(argv)

    config = LiveDataConfig.load(args.config)
    if args.time_unit is not None:
        config.time_unit = args.time_unit
    if args.timezone is not None:
        config.timezone = args.timezone
    if args.log_level is not None:
        config.log_level = args.log_level

    try:
        config.validate()
    except ConfigError as e:
        print(f"livedata: {e}", file=sys.stderr)
        return 2
    if args.refresh_every is not None and args.refresh_every <= 0:
        print(f"livedata: --refresh-every must be positive, got {args.refresh_every}", file=sys.stderr)
        return 2

    logging.basicConfig(level=config.log_level, stream=sys.stderr, format="%(name)s %(levelname)s: %(message)s")

    try:
        asyncio.run(_run(config, args.duration, args.refresh_every))
    except KeyboardInterrupt:
        pass
    return 0
