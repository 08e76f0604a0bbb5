from __future__ import annotations

import asyncio
from datetime import time

import pytest

from factories import make_event
from vodtimer.api.models import TimerStatus
from vodtimer.ticker import AsyncioTickScheduler
from vodtimer.timer_engine import TimerEngine


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        AsyncioTickScheduler(interval_s=0)


@pytest.mark.asyncio
async def test_asyncio_scheduler_runs_queue_to_finish() -> None:
    scheduler = AsyncioTickScheduler(interval_s=0.01)
    engine = TimerEngine(scheduler=scheduler)
    engine.load_queue([make_event("a", seconds=2), make_event("b", start=time(0, 1, 0), seconds=1)])

    engine.start()
    assert scheduler.armed

    for _ in range(100):
        if engine.status == TimerStatus.finished:
            break
        await asyncio.sleep(0.01)

    assert engine.status == TimerStatus.finished
    assert engine.current_index == 1
    assert engine.remaining_seconds == 0
    assert not scheduler.armed


@pytest.mark.asyncio
async def test_asyncio_scheduler_stops_on_pause() -> None:
    scheduler = AsyncioTickScheduler(interval_s=0.01)
    engine = TimerEngine(scheduler=scheduler)
    engine.load_queue([make_event("a", seconds=500)])

    engine.start()
    await asyncio.sleep(0.05)
    engine.pause()
    frozen = engine.remaining_seconds
    assert frozen < 500
    assert not scheduler.armed

    await asyncio.sleep(0.05)
    assert engine.remaining_seconds == frozen


@pytest.mark.asyncio
async def test_arm_is_idempotent() -> None:
    scheduler = AsyncioTickScheduler(interval_s=0.01)
    calls: list[int] = []

    scheduler.arm(lambda: calls.append(1))
    scheduler.arm(lambda: calls.append(2))
    await asyncio.sleep(0.035)
    scheduler.cancel()

    assert calls
    assert set(calls) == {1}


def test_start_without_running_loop_leaves_engine_idle() -> None:
    engine = TimerEngine(scheduler=AsyncioTickScheduler(interval_s=0.01))
    engine.load_queue([make_event("a", seconds=5), make_event("b", start=time(0, 1, 0), seconds=3)])

    with pytest.raises(RuntimeError):
        engine.start()
    assert engine.status == TimerStatus.idle
    assert engine.remaining_seconds == 5

    with pytest.raises(RuntimeError):
        engine.skip()
    assert engine.status == TimerStatus.idle
    assert engine.current_index == 0
    assert not engine.scheduler.armed  # type: ignore[union-attr]
