"""Tests for ProgressTicker lifecycle and resilience.

These tests verify:
- The tick callback runs repeatedly while started
- Repeated start() calls never create a second task
- stop() cancels the task and is safe to repeat
- A failing tick doesn't kill the loop
"""

import asyncio

import pytest

from music_player.services.ticker import ProgressTicker


class TestTickerLifecycle:
    @pytest.mark.asyncio
    async def test_ticks_repeatedly(self):
        count = 0

        async def on_tick():
            nonlocal count
            count += 1

        ticker = ProgressTicker(on_tick, interval=0.01)
        await ticker.start()
        await asyncio.sleep(0.1)
        await ticker.stop()

        assert count >= 3

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        async def on_tick():
            pass

        ticker = ProgressTicker(on_tick, interval=0.01)
        await ticker.start()
        first_task = ticker._task
        await ticker.start()
        await ticker.start()

        assert ticker._task is first_task
        await ticker.stop()

    @pytest.mark.asyncio
    async def test_stop_cancels_task(self):
        async def on_tick():
            pass

        ticker = ProgressTicker(on_tick, interval=0.01)
        await ticker.start()
        task = ticker._task
        await ticker.stop()

        assert task.cancelled() or task.done()
        assert ticker._task is None
        assert ticker.is_running is False

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        async def on_tick():
            pass

        ticker = ProgressTicker(on_tick)
        # Should not raise
        await ticker.stop()
        await ticker.stop()

    @pytest.mark.asyncio
    async def test_no_ticks_after_stop(self):
        count = 0

        async def on_tick():
            nonlocal count
            count += 1

        ticker = ProgressTicker(on_tick, interval=0.01)
        await ticker.start()
        await asyncio.sleep(0.05)
        await ticker.stop()
        stopped_at = count
        await asyncio.sleep(0.05)

        assert count == stopped_at

    @pytest.mark.asyncio
    async def test_restart_after_stop(self):
        count = 0

        async def on_tick():
            nonlocal count
            count += 1

        ticker = ProgressTicker(on_tick, interval=0.01)
        await ticker.start()
        await ticker.stop()
        await ticker.start()
        await asyncio.sleep(0.05)
        await ticker.stop()

        assert count >= 1


class TestTickerResilience:
    @pytest.mark.asyncio
    async def test_loop_continues_after_exception(self):
        """Tick loop keeps going after the callback raises."""
        count = 0

        async def on_tick():
            nonlocal count
            count += 1
            if count == 2:
                raise RuntimeError("tick failed")

        ticker = ProgressTicker(on_tick, interval=0.01)
        await ticker.start()
        await asyncio.sleep(0.1)
        await ticker.stop()

        assert count > 2
