"""Tests for GroupPoller."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from groupchat.errors import NetworkError
from groupchat.sync import GroupPoller

INTERVAL = 0.02


def _poller(fetch, on_batch=None, on_error=None, interval=INTERVAL):
    return GroupPoller(
        "g1",
        fetch=fetch,
        on_batch=on_batch or AsyncMock(),
        on_error=on_error or AsyncMock(),
        interval=interval,
    )


class TestSchedule:
    """Tests for the tick schedule."""

    @pytest.mark.asyncio
    async def test_first_tick_is_immediate(self):
        fetch = AsyncMock(return_value=[])
        on_batch = AsyncMock()
        poller = _poller(fetch, on_batch, interval=60)

        poller.start()
        await asyncio.sleep(0.01)
        await poller.stop()

        fetch.assert_awaited_once_with("g1")
        on_batch.assert_awaited_once_with("g1", [], 0)

    @pytest.mark.asyncio
    async def test_ticks_repeat_on_interval(self):
        fetch = AsyncMock(return_value=[])
        poller = _poller(fetch)

        poller.start()
        await asyncio.sleep(INTERVAL * 5)
        await poller.stop()

        assert fetch.await_count >= 3

    @pytest.mark.asyncio
    async def test_stop_cancels_future_ticks(self):
        fetch = AsyncMock(return_value=[])
        poller = _poller(fetch)

        poller.start()
        await asyncio.sleep(INTERVAL * 2)
        await poller.stop()
        count = fetch.await_count
        await asyncio.sleep(INTERVAL * 3)

        assert fetch.await_count == count
        assert poller.running is False

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_schedule(self):
        fetch = AsyncMock(return_value=[])
        poller = _poller(fetch, interval=60)

        poller.start()
        poller.start()
        await asyncio.sleep(0.01)
        await poller.stop()

        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_stop_before_start(self):
        poller = _poller(AsyncMock(return_value=[]))
        await poller.stop()
        assert poller.running is False


class TestOverlap:
    """Tests for slow ticks."""

    @pytest.mark.asyncio
    async def test_slow_ticks_overlap(self):
        """Test that the schedule does not wait for a slow fetch."""
        release = asyncio.Event()

        async def slow_fetch(group_id):
            await release.wait()
            return []

        on_batch = AsyncMock()
        poller = _poller(slow_fetch, on_batch)

        poller.start()
        await asyncio.sleep(INTERVAL * 4)
        await poller.stop()

        assert poller.in_flight >= 2
        on_batch.assert_not_awaited()

        release.set()
        await poller.drain()

        assert poller.in_flight == 0
        assert on_batch.await_count == poller.ticks

    @pytest.mark.asyncio
    async def test_in_flight_tick_completes_after_stop(self):
        release = asyncio.Event()

        async def slow_fetch(group_id):
            await release.wait()
            return ["late"]

        on_batch = AsyncMock()
        poller = _poller(slow_fetch, on_batch, interval=60)

        poller.start()
        await asyncio.sleep(0.01)
        await poller.stop()
        release.set()
        await poller.drain()

        on_batch.assert_awaited_once_with("g1", ["late"], 0)


class TestErrors:
    """Tests for tick failures."""

    @pytest.mark.asyncio
    async def test_chat_error_reported_and_schedule_continues(self):
        fetch = AsyncMock(side_effect=[NetworkError("down"), [], []])
        on_error = AsyncMock()
        on_batch = AsyncMock()
        poller = _poller(fetch, on_batch, on_error)

        poller.start()
        await asyncio.sleep(INTERVAL * 2.5)
        await poller.stop()
        await poller.drain()

        on_error.assert_awaited_once()
        group_id, error, seq = on_error.await_args.args
        assert group_id == "g1"
        assert isinstance(error, NetworkError)
        assert seq == 0
        assert on_batch.await_count >= 1

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_kill_schedule(self):
        fetch = AsyncMock(side_effect=[RuntimeError("bug"), [], [], [], []])
        on_error = AsyncMock()
        poller = _poller(fetch, on_error=on_error)

        poller.start()
        await asyncio.sleep(INTERVAL * 2.5)
        await poller.stop()
        await poller.drain()

        on_error.assert_not_awaited()
        assert fetch.await_count >= 2

    @pytest.mark.asyncio
    async def test_batch_handler_error_is_contained(self):
        fetch = AsyncMock(return_value=[])
        on_batch = AsyncMock(side_effect=RuntimeError("handler bug"))
        poller = _poller(fetch, on_batch)

        poller.start()
        await asyncio.sleep(INTERVAL * 2.5)
        await poller.stop()
        await poller.drain()

        assert on_batch.await_count >= 2
