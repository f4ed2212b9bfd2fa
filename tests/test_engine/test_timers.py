"""Tests for the asyncio timer backend and ScheduledTask."""

import asyncio
import time

import pytest

from canvas_observer.engine.timers import LoopTimers, ScheduledTask


@pytest.mark.asyncio
async def test_loop_timers_use_loop_clock_for_intervals():
    loop = asyncio.get_running_loop()
    timers = LoopTimers()

    assert timers.now_ms() == pytest.approx(loop.time() * 1000.0, abs=50.0)
    assert timers.epoch_ms() == pytest.approx(time.time() * 1000.0, abs=50.0)

    fired = asyncio.Event()
    timers.call_later(10, fired.set)
    await asyncio.wait_for(fired.wait(), timeout=1.0)


@pytest.mark.asyncio
async def test_scheduled_task_keeps_one_callback():
    task = ScheduledTask(LoopTimers())
    fired = []
    task.arm(10, lambda: fired.append("first"))
    task.arm(10, lambda: fired.append("second"))
    assert task.pending

    await asyncio.sleep(0.05)
    assert fired == ["second"]
    assert not task.pending


def test_scheduled_task_cancel(timers):
    task = ScheduledTask(timers)
    fired = []
    task.arm(100, lambda: fired.append(True))
    task.cancel()
    timers.advance(500)
    assert fired == []
    assert timers.scheduled == 0
