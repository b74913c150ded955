"""Tests for LiveDataViewModel and create_view_model."""

import asyncio
import logging

import pytest

from livedata.config import LiveDataConfig
from livedata.core.cache import DEFAULT_CACHED_VALUE
from livedata.data_source import DefaultDataSource
from livedata.errors import ConfigError, FetchFailed
from livedata.view_model import LOADING_STRING, LiveDataViewModel, create_view_model


@pytest.fixture
def view_model(data_source, time_unit):
    return LiveDataViewModel(data_source, time_unit=time_unit, timezone="UTC")


class TestStreams:
    @pytest.mark.asyncio
    async def test_weather_starts_with_loading(self, view_model):
        assert await view_model.current_weather.take(3) == [LOADING_STRING, "Cloudy", "Rainy"]

    def test_loading_string(self):
        assert LOADING_STRING == "Loading..."

    @pytest.mark.asyncio
    async def test_current_time_raw(self, view_model):
        assert await view_model.current_time.take(2) == [1000, 1001]

    @pytest.mark.asyncio
    async def test_current_time_transformed(self, view_model):
        values = await view_model.current_time_transformed.take(2)
        assert values == [
            "Thu Jan 01 00:00:01 UTC 1970",
            "Thu Jan 01 00:00:01 UTC 1970",
        ]

    @pytest.mark.asyncio
    async def test_timestamp_to_time_waits(self, view_model):
        loop = asyncio.get_running_loop()
        start = loop.time()
        text = await view_model.timestamp_to_time(0)
        assert loop.time() - start >= 0.004
        assert text == "Thu Jan 01 00:00:00 UTC 1970"

    @pytest.mark.asyncio
    async def test_cached_value_stream(self, view_model):
        assert await view_model.cached_value.take(1) == [DEFAULT_CACHED_VALUE]


class TestRefresh:
    @pytest.mark.asyncio
    async def test_on_refresh_updates_cache(self, view_model, data_source):
        task = view_model.on_refresh()
        assert view_model.pending_refreshes == 1
        await task
        await asyncio.sleep(0)
        assert data_source.cached_data.value == "New data from request #1"
        assert view_model.pending_refreshes == 0

    @pytest.mark.asyncio
    async def test_failed_refresh_is_logged(self, fake_clock, caplog):
        async def fetch():
            raise FetchFailed("unreachable")

        vm = LiveDataViewModel(DefaultDataSource(time_unit=0.01, clock=fake_clock, fetcher=fetch))
        with caplog.at_level(logging.ERROR):
            task = vm.on_refresh()
            await asyncio.gather(task, return_exceptions=True)
            await asyncio.sleep(0)
        assert "Background refresh failed" in caplog.text

    @pytest.mark.asyncio
    async def test_close_cancels_pending(self, view_model, data_source):
        task = view_model.on_refresh()
        await asyncio.sleep(0)
        await view_model.close()
        assert task.cancelled()
        assert data_source.cached_data.value == DEFAULT_CACHED_VALUE


class TestCreateViewModel:
    def test_defaults(self):
        vm = create_view_model()
        assert isinstance(vm.data_source, DefaultDataSource)
        assert vm.time_unit == 1.0
        assert vm.timezone is None

    def test_uses_config(self):
        vm = create_view_model(LiveDataConfig(time_unit=0.5, timezone="UTC"))
        assert vm.data_source.time_unit == 0.5
        assert vm.timezone == "UTC"

    def test_rejects_bad_config(self):
        with pytest.raises(ConfigError):
            create_view_model(LiveDataConfig(time_unit=0))

    def test_separate_instances(self):
        assert create_view_model().data_source is not create_view_model().data_source
