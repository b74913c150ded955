"""Tests for Stream, Subscription and the stream combinators."""

import asyncio
import logging
import threading

import pytest

from livedata.core.streams import Stream, Subscription, concat


def ticking(interval=0.01, closed=None):
    """Infinite 0, 1, 2, ... stream; sets closed["flag"] when the producer exits."""

    async def produce():
        n = 0
        try:
            while True:
                yield n
                n += 1
                await asyncio.sleep(interval)
        finally:
            if closed is not None:
                closed["flag"] = True

    return Stream(produce, name="ticking")


class TestStreamBasics:
    @pytest.mark.asyncio
    async def test_of_yields_values_in_order(self):
        assert await Stream.of(1, 2, 3).take(10) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_take_zero_returns_empty(self):
        assert await ticking().take(0) == []

    @pytest.mark.asyncio
    async def test_take_closes_infinite_producer(self):
        closed = {"flag": False}
        assert await ticking(closed=closed).take(3) == [0, 1, 2]
        assert closed["flag"]

    @pytest.mark.asyncio
    async def test_each_iteration_is_fresh(self):
        """Cold stream: a second consumer starts from the beginning."""
        stream = ticking()
        assert await stream.take(2) == [0, 1]
        assert await stream.take(2) == [0, 1]

    @pytest.mark.asyncio
    async def test_async_for(self):
        seen = [v async for v in Stream.of("a", "b")]
        assert seen == ["a", "b"]

    @pytest.mark.asyncio
    async def test_map(self):
        assert await Stream.of(1, 2, 3).map(lambda n: n * 10).take(3) == [10, 20, 30]


class TestSubscription:
    @pytest.mark.asyncio
    async def test_subscribe_delivers_values(self, recorder):
        sub = ticking().subscribe(recorder)
        await asyncio.sleep(0.05)
        sub.dispose()
        assert recorder.values[:3] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_no_values_after_dispose(self, recorder):
        sub = ticking(interval=0.005).subscribe(recorder)
        await asyncio.sleep(0.03)
        sub.dispose()
        count = len(recorder.values)
        await asyncio.sleep(0.05)
        assert len(recorder.values) == count
        assert sub.disposed

    @pytest.mark.asyncio
    async def test_dispose_closes_producer(self, recorder):
        closed = {"flag": False}
        sub = ticking(closed=closed).subscribe(recorder)
        await asyncio.sleep(0.02)
        sub.dispose()
        await sub.wait_closed()
        assert closed["flag"]

    @pytest.mark.asyncio
    async def test_dispose_is_idempotent(self, recorder):
        sub = ticking().subscribe(recorder)
        sub.dispose()
        sub.dispose()
        await sub.wait_closed()
        assert sub.disposed

    @pytest.mark.asyncio
    async def test_dispose_from_other_thread(self, recorder):
        closed = {"flag": False}
        sub = ticking(interval=0.005, closed=closed).subscribe(recorder)
        await asyncio.sleep(0.02)
        t = threading.Thread(target=sub.dispose)
        t.start()
        t.join()
        await asyncio.wait_for(sub.wait_closed(), timeout=1.0)
        assert closed["flag"]

    @pytest.mark.asyncio
    async def test_context_manager_disposes(self, recorder):
        with ticking().subscribe(recorder) as sub:
            await asyncio.sleep(0.01)
        assert sub.disposed

    @pytest.mark.asyncio
    async def test_finite_stream_completes(self, recorder):
        sub = Stream.of(1, 2).subscribe(recorder)
        await sub.wait_closed()
        assert recorder.values == [1, 2]

    @pytest.mark.asyncio
    async def test_producer_error_goes_to_on_error(self, recorder):
        async def produce():
            yield 1
            raise RuntimeError("boom")

        errors = []
        sub = Stream(produce).subscribe(recorder, on_error=errors.append)
        await sub.wait_closed()
        assert recorder.values == [1]
        assert isinstance(errors[0], RuntimeError)

    @pytest.mark.asyncio
    async def test_producer_error_logged_without_handler(self, recorder, caplog):
        async def produce():
            raise RuntimeError("boom")
            yield  # pragma: no cover

        with caplog.at_level(logging.ERROR):
            sub = Stream(produce, name="broken").subscribe(recorder)
            await sub.wait_closed()
        assert "broken" in caplog.text

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_stop_delivery(self, caplog):
        seen = []

        def on_next(value):
            seen.append(value)
            if value == 1:
                raise RuntimeError("render failed")

        errors = []
        sub = Stream.of(0, 1, 2, 3, 4).subscribe(on_next, on_error=errors.append)
        await sub.wait_closed()

        assert seen == [0, 1, 2, 3, 4]
        assert errors == []
        assert "Subscriber to" in caplog.text

    def test_subscription_without_task(self):
        calls = []
        sub = Subscription(lambda: calls.append(1))
        sub.dispose()
        sub.dispose()
        assert calls == [1]


class TestConcat:
    @pytest.mark.asyncio
    async def test_literal_then_source(self):
        stream = concat(Stream.of("Loading..."), ticking())
        assert await stream.take(4) == ["Loading...", 0, 1, 2]

    @pytest.mark.asyncio
    async def test_finite_streams_in_order(self):
        stream = concat(Stream.of(1, 2), Stream.of(), Stream.of(3))
        assert [v async for v in stream] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_closing_concat_closes_inner_source(self):
        closed = {"flag": False}
        stream = concat(Stream.of("x"), ticking(closed=closed))
        await stream.take(2)
        assert closed["flag"]


class TestSwitchMap:
    @pytest.mark.asyncio
    async def test_transforms_each_value(self):
        async def double(n):
            await asyncio.sleep(0)
            return n * 2

        assert [v async for v in Stream.of(3).switch_map(double)] == [6]

    @pytest.mark.asyncio
    async def test_slow_transform_overtaken_is_dropped(self):
        async def produce():
            yield 1
            yield 2
            await asyncio.sleep(0.1)

        async def label(n):
            await asyncio.sleep(0.02)
            return f"t{n}"

        results = [v async for v in Stream(produce).switch_map(label)]
        assert results == ["t2"]

    @pytest.mark.asyncio
    async def test_fast_transform_keeps_every_value(self):
        async def label(n):
            return f"t{n}"

        assert await ticking(interval=0.01).switch_map(label).take(3) == ["t0", "t1", "t2"]

    @pytest.mark.asyncio
    async def test_transform_error_propagates(self):
        async def fail(n):
            raise ValueError(f"bad {n}")

        with pytest.raises(ValueError, match="bad 0"):
            await ticking().switch_map(fail).take(1)

    @pytest.mark.asyncio
    async def test_closing_switch_map_closes_source(self):
        closed = {"flag": False}

        async def label(n):
            return n

        await ticking(closed=closed).switch_map(label).take(2)
        await asyncio.sleep(0.01)
        assert closed["flag"]
