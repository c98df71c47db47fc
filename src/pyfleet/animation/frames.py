"""Frame clocks driving the animation loops.

A frame clock is a queue of one-shot callbacks.  Once per frame the
queue is flushed and every callback pending at that moment is invoked
with the same timestamp (milliseconds).  Callbacks that want to run on
the next frame request it again, the way a browser's
``requestAnimationFrame`` works.

Two clocks are provided:

* :class:`AsyncioFrameClock` flushes on an asyncio timer at a fixed
  interval (60 Hz by default).
* :class:`ManualFrameClock` only flushes when told to; it drives
  deterministic replays and tests.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from pyfleet._constants import DEFAULT_FRAME_INTERVAL_MS

_logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameClock(Protocol):
    """Per-frame notification capability injected into animation loops."""

    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    def request_frame(self, callback: FrameCallback) -> int:
        """Run *callback* once on the next frame; returns a handle for cancellation."""
        ...

    def cancel_frame(self, handle: int) -> None:
        """Drop a pending request.  Unknown or already-run handles are ignored."""
        ...


class _FrameQueue:
    """Shared callback bookkeeping for the concrete clocks."""

    def __init__(self) -> None:
        self._pending: dict[int, FrameCallback] = {}
        # Batch currently being flushed, so cancellation reaches it too.
        self._flushing: dict[int, FrameCallback] | None = None
        self._next_handle = 0

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        handle = self._next_handle
        self._pending[handle] = callback
        self._on_request()
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)
        if self._flushing is not None:
            self._flushing.pop(handle, None)
        if not self._pending:
            self._on_idle()

    def _on_request(self) -> None:
        """Hook: a callback was queued."""

    def _on_idle(self) -> None:
        """Hook: nothing is pending any more."""

    def _flush(self, timestamp: float) -> int:
        """Invoke every callback pending now; returns how many ran."""
        batch = self._pending
        self._pending = {}
        self._flushing = batch
        ran = 0
        try:
            while batch:
                handle = next(iter(batch))
                callback = batch.pop(handle)
                try:
                    callback(timestamp)
                except Exception:
                    _logger.warning("Frame callback %d failed", handle, exc_info=True)
                ran += 1
        finally:
            self._flushing = None
        return ran


class AsyncioFrameClock(_FrameQueue):
    """Frame clock ticking on the running asyncio event loop.

    A single timer is armed while at least one callback is pending, so an
    idle clock costs nothing.
    """

    def __init__(
        self,
        interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        super().__init__()
        self._interval_ms = interval_ms
        self._loop = loop
        self._timer: asyncio.TimerHandle | None = None

    @property
    def interval_ms(self) -> float:
        return self._interval_ms

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self._event_loop().time() * 1000.0

    def _on_request(self) -> None:
        if self._timer is None:
            self._timer = self._event_loop().call_later(self._interval_ms / 1000.0, self._on_timer)

    def _on_idle(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self._flush(self.now())

    def close(self) -> None:
        """Drop every pending callback and disarm the timer."""
        self._pending.clear()
        self._on_idle()


class ManualFrameClock(_FrameQueue):
    """Frame clock that only advances when asked to."""

    def __init__(self, start: float = 0.0) -> None:
        super().__init__()
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def tick(self) -> int:
        """Flush one frame at the current time."""
        return self._flush(self._now)

    def advance(self, delta_ms: float) -> int:
        """Move time forward by *delta_ms* and flush one frame."""
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be non-negative, got {delta_ms}")
        self._now += delta_ms
        return self._flush(self._now)

    def advance_to(self, timestamp: float) -> int:
        """Move time forward to *timestamp* and flush one frame."""
        return self.advance(timestamp - self._now)

    def run(self, duration_ms: float, step_ms: float) -> int:
        """Flush a frame every *step_ms* for *duration_ms*; returns the frame count.

        The last step is shortened so time ends exactly at
        ``start + duration_ms``.
        """
        if step_ms <= 0:
            raise ValueError(f"step_ms must be positive, got {step_ms}")
        end = self._now + duration_ms
        frames = 0
        while self._now < end:
            self.advance_to(min(self._now + step_ms, end))
            frames += 1
        return frames
