from __future__ import annotations

import asyncio
import logging

import pytest

from pyfleet.animation.frames import AsyncioFrameClock, ManualFrameClock


def test_pending_callbacks_share_one_timestamp() -> None:
    clock = ManualFrameClock(start=100.0)
    seen: list[tuple[str, float]] = []

    clock.request_frame(lambda ts: seen.append(("a", ts)))
    clock.request_frame(lambda ts: seen.append(("b", ts)))

    assert clock.pending_count == 2
    assert clock.advance(16.0) == 2
    assert seen == [("a", 116.0), ("b", 116.0)]
    assert clock.pending_count == 0


def test_request_during_flush_runs_on_next_frame() -> None:
    clock = ManualFrameClock()
    seen: list[float] = []

    def again(ts: float) -> None:
        seen.append(ts)
        clock.request_frame(seen.append)

    clock.request_frame(again)

    assert clock.advance(10.0) == 1
    assert seen == [10.0]
    assert clock.advance(10.0) == 1
    assert seen == [10.0, 20.0]


def test_cancel_frame_before_and_during_flush() -> None:
    clock = ManualFrameClock()
    seen: list[str] = []

    cancelled = clock.request_frame(lambda _ts: seen.append("cancelled"))
    clock.cancel_frame(cancelled)
    clock.cancel_frame(cancelled)
    clock.cancel_frame(12345)

    later: list[int] = []
    clock.request_frame(lambda _ts: clock.cancel_frame(later[0]))
    later.append(clock.request_frame(lambda _ts: seen.append("same batch")))

    clock.tick()

    assert seen == []
    assert clock.pending_count == 0


def test_failing_callback_does_not_stop_others(caplog: pytest.LogCaptureFixture) -> None:
    clock = ManualFrameClock()
    seen: list[float] = []

    def boom(_ts: float) -> None:
        raise RuntimeError("renderer exploded")

    clock.request_frame(boom)
    clock.request_frame(seen.append)

    with caplog.at_level(logging.WARNING, logger="pyfleet.animation.frames"):
        assert clock.advance(5.0) == 2

    assert seen == [5.0]
    assert "Frame callback" in caplog.text


def test_handles_are_unique() -> None:
    clock = ManualFrameClock()
    handles = {clock.request_frame(lambda _ts: None) for _ in range(5)}
    assert len(handles) == 5


def test_advance_rejects_going_back_in_time() -> None:
    clock = ManualFrameClock(start=50.0)
    with pytest.raises(ValueError):
        clock.advance(-1.0)
    with pytest.raises(ValueError):
        clock.advance_to(10.0)
    assert clock.now() == 50.0


def test_run_ends_exactly_at_duration() -> None:
    clock = ManualFrameClock()
    ticks: list[float] = []

    def keep_ticking(ts: float) -> None:
        ticks.append(ts)
        clock.request_frame(keep_ticking)

    clock.request_frame(keep_ticking)

    assert clock.run(100.0, 30.0) == 4
    assert ticks == [30.0, 60.0, 90.0, 100.0]
    assert clock.now() == 100.0


@pytest.mark.asyncio
async def test_asyncio_clock_fires_pending_callbacks() -> None:
    clock = AsyncioFrameClock(interval_ms=5.0)
    fired = asyncio.get_running_loop().create_future()
    before = clock.now()

    clock.request_frame(fired.set_result)
    timestamp = await asyncio.wait_for(fired, timeout=1.0)

    assert timestamp >= before
    assert clock.pending_count == 0
    clock.close()


@pytest.mark.asyncio
async def test_asyncio_clock_cancel_and_close() -> None:
    clock = AsyncioFrameClock(interval_ms=5.0)
    seen: list[float] = []

    handle = clock.request_frame(seen.append)
    clock.cancel_frame(handle)
    clock.request_frame(seen.append)
    clock.close()

    await asyncio.sleep(0.05)

    assert seen == []
    assert clock.pending_count == 0


def test_asyncio_clock_rejects_bad_interval() -> None:
    with pytest.raises(ValueError):
        AsyncioFrameClock(interval_ms=0)
