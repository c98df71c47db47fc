"""Per-vehicle animation loop.

A :class:`VehicleAnimation` moves one vehicle's marker along its path,
one segment (point to next point) per ``segment_duration_ms``, wrapping
from the last point back to the first.  It runs until cancelled: each
frame callback does its work and then requests the next frame.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pyfleet.animation.frames import FrameClock
from pyfleet.animation.interpolate import interpolate
from pyfleet.animation.status import classify_status
from pyfleet.exceptions import DegenerateTrajectoryError, StaleHandleError
from pyfleet.models.animation import AnimationState, DisplayedPosition, LoopState
from pyfleet.models.geo import LatLng
from pyfleet.models.trajectory import Trajectory
from pyfleet.rendering import Renderer

_logger = logging.getLogger(__name__)


class VehicleAnimation:
    """Cancellable frame-driven animation of one vehicle.

    Parameters
    ----------
    trajectory : Trajectory
        Recorded samples.  Status tiers always come from these samples.
    clock : FrameClock
        Source of time and frame callbacks.
    renderer : Renderer
        Receives a :class:`DisplayedPosition` every frame.
    segment_duration_ms : float
        Time to travel one segment.
    path : sequence of LatLng, optional
        Points to move along instead of the recorded coordinates (a
        road-snapped route).  When its length differs from the sample
        count, each point reads the status of the proportionally
        corresponding sample.

    Raises
    ------
    DegenerateTrajectoryError
        If the trajectory or the path has fewer than two points.
    """

    def __init__(
        self,
        trajectory: Trajectory,
        *,
        clock: FrameClock,
        renderer: Renderer,
        segment_duration_ms: float,
        path: Sequence[LatLng] | None = None,
    ) -> None:
        points = tuple(path) if path is not None else tuple(trajectory.coordinates())
        if not trajectory.is_animatable or len(points) < 2:
            raise DegenerateTrajectoryError(trajectory.vehicle_id, min(len(trajectory.samples), len(points)))
        if segment_duration_ms <= 0:
            raise ValueError(f"segment_duration_ms must be positive, got {segment_duration_ms}")

        self._trajectory = trajectory
        self._points = points
        self._clock = clock
        self._renderer = renderer
        self._segment_duration_ms = segment_duration_ms
        self._state = AnimationState()
        self._loop_state = LoopState.IDLE
        self._frame_handle: int | None = None
        self._last_position: DisplayedPosition | None = None
        self._tick_count = 0

    @property
    def vehicle_id(self) -> str:
        return self._trajectory.vehicle_id

    @property
    def trajectory(self) -> Trajectory:
        return self._trajectory

    @property
    def path(self) -> tuple[LatLng, ...]:
        return self._points

    @property
    def state(self) -> LoopState:
        return self._loop_state

    @property
    def is_running(self) -> bool:
        return self._loop_state is LoopState.RUNNING

    @property
    def animation_state(self) -> AnimationState:
        """Live progress record; read-only for everyone but this loop."""
        return self._state

    @property
    def last_position(self) -> DisplayedPosition | None:
        """Position computed by the most recent frame."""
        return self._last_position

    @property
    def tick_count(self) -> int:
        return self._tick_count

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin at the first point.  No-op while already running."""
        if self._loop_state is LoopState.RUNNING:
            return
        self._state.segment_index = 0
        self._state.segment_start_time = self._clock.now()
        self._state.active = True
        self._loop_state = LoopState.RUNNING
        self._frame_handle = self._clock.request_frame(self._on_frame)

    def cancel(self) -> None:
        """Stop requesting frames.  Safe to call any number of times."""
        if self._frame_handle is not None:
            self._clock.cancel_frame(self._frame_handle)
            self._frame_handle = None
        if self._loop_state is LoopState.IDLE:
            return
        self._loop_state = LoopState.IDLE
        self._state.reset()

    # ------------------------------------------------------------------
    # Frame work
    # ------------------------------------------------------------------

    def status_index(self, point_index: int) -> int:
        """Sample index whose status applies at path point *point_index*."""
        sample_count = len(self._trajectory.samples)
        point_count = len(self._points)
        if point_count == sample_count:
            return point_index
        return round(point_index * (sample_count - 1) / (point_count - 1))

    def _advance(self, timestamp: float) -> float:
        """Update segment bookkeeping for *timestamp*; returns progress in [0, 1)."""
        state = self._state
        progress = max(0.0, (timestamp - state.segment_start_time) / self._segment_duration_ms)
        if progress >= 1:
            state.segment_index = (state.segment_index + 1) % len(self._points)
            state.segment_start_time = timestamp
            progress = 0.0
        return progress

    def _display(self, progress: float) -> DisplayedPosition:
        index = self._state.segment_index
        current = self._points[index]
        following = self._points[(index + 1) % len(self._points)]
        point = interpolate(current, following, progress)
        status = self._trajectory.samples[self.status_index(index)].status
        return DisplayedPosition(
            vehicle_id=self.vehicle_id,
            latitude=point.latitude,
            longitude=point.longitude,
            status=status,
            tier=classify_status(status),
        )

    def _on_frame(self, timestamp: float) -> None:
        self._frame_handle = None
        if self._loop_state is not LoopState.RUNNING:
            return

        position = self._display(self._advance(timestamp))
        self._last_position = position
        self._tick_count += 1
        self._emit(position)

        # The renderer may have cancelled us while handling the update.
        if self._loop_state is LoopState.RUNNING:
            self._frame_handle = self._clock.request_frame(self._on_frame)

    def _emit(self, position: DisplayedPosition) -> None:
        """Hand *position* to the renderer; a failed update only costs this frame."""
        try:
            marker = self._renderer.marker(self.vehicle_id)
            if marker is None:
                _logger.debug("No marker for vehicle %s; skipping frame", self.vehicle_id)
                return
            marker.move(position)
        except StaleHandleError:
            _logger.debug("Stale marker for vehicle %s; skipping frame", self.vehicle_id)
        except Exception:
            _logger.warning("Marker update failed for vehicle %s; skipping frame", self.vehicle_id, exc_info=True)
