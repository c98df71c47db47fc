"""Animation scheduler.

Owns the registry of running per-vehicle loops and the fleet-wide
start/stop/reload lifecycle::

    scheduler = AnimationScheduler(renderer, clock)
    scheduler.load(trajectories)
    await scheduler.start_all()
    ...
    scheduler.stop_all()
    scheduler.dispose()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from pyfleet._api.roads import RouteRefiner
from pyfleet._cache import RefinedPathCache
from pyfleet._constants import DEFAULT_SEGMENT_DURATION_MS
from pyfleet.animation.frames import FrameClock
from pyfleet.animation.loop import VehicleAnimation
from pyfleet.animation.refine import refine_or_fallback
from pyfleet.animation.status import classify_status
from pyfleet.exceptions import FleetError, StaleHandleError
from pyfleet.models.animation import DisplayedPosition, MapLayer, MapLayerKind
from pyfleet.models.geo import LatLng
from pyfleet.models.trajectory import Trajectory
from pyfleet.rendering import Renderer
from pyfleet.state.store import TrajectoryStore

_logger = logging.getLogger(__name__)


class AnimationScheduler:
    """Starts, stops and restarts one animation loop per vehicle.

    Every lifecycle call takes a new generation number.  Path resolution
    for :meth:`start_all` may await the route refiner; a resolution that
    finishes after a newer ``start_all``, ``stop_all`` or ``load`` sees a
    stale generation and is discarded, so a vehicle never ends up with two
    loops.
    """

    def __init__(
        self,
        renderer: Renderer,
        clock: FrameClock,
        *,
        store: TrajectoryStore | None = None,
        segment_duration_ms: float = DEFAULT_SEGMENT_DURATION_MS,
        refiner: RouteRefiner | None = None,
    ) -> None:
        if segment_duration_ms <= 0:
            raise ValueError(f"segment_duration_ms must be positive, got {segment_duration_ms}")
        self._renderer = renderer
        self._clock = clock
        self._store = store if store is not None else TrajectoryStore()
        self._segment_duration_ms = segment_duration_ms
        self._refiner = refiner
        self._cache = RefinedPathCache()
        self._loops: dict[str, VehicleAnimation] = {}
        self._generation = 0
        self._disposed = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def store(self) -> TrajectoryStore:
        return self._store

    @property
    def clock(self) -> FrameClock:
        return self._clock

    @property
    def is_running(self) -> bool:
        return bool(self._loops)

    @property
    def active_vehicle_ids(self) -> tuple[str, ...]:
        return tuple(self._loops)

    def loop_for(self, vehicle_id: str) -> VehicleAnimation | None:
        return self._loops.get(vehicle_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self, trajectories: Iterable[Trajectory]) -> None:
        """Replace the trajectory set and announce its map layers.

        Running loops are cancelled first (without rest positioning) so
        none of them keeps animating a route that is no longer loaded.

        Raises
        ------
        ValueError
            If two trajectories share a vehicle id.  Nothing changes in
            that case: running loops keep running on the current set.
        """
        self._require_not_disposed()
        staged = TrajectoryStore.stage(trajectories)
        self._cancel_loops()
        self._store.load(staged.values())
        self._cache.clear()
        self._emit_layers()
        _logger.info(
            "Loaded %d trajectories (%d animatable)",
            len(self._store),
            len(self._store.animatable()),
        )

    async def start_all(self) -> int:
        """Start one loop per vehicle with at least two samples.

        Existing loops are cancelled first, so calling this twice never
        doubles a vehicle's updates.  Returns the number of loops started.
        """
        self._require_not_disposed()
        self._cancel_loops()
        generation = self._generation
        candidates = self._store.animatable()
        if not candidates:
            _logger.debug("Nothing to animate")
            return 0

        results = await asyncio.gather(*(self._start_vehicle(t, generation) for t in candidates))
        started = sum(results)
        _logger.info("Started %d of %d animation loops", started, len(candidates))
        return started

    def stop_all(self) -> int:
        """Cancel every loop and park each vehicle on its last sample.

        Returns the number of vehicles parked; ``0`` when nothing was
        running.
        """
        loops = self._cancel_loops()
        for loop in loops.values():
            self._park(loop.trajectory)
        if loops:
            _logger.info("Stopped %d animation loops", len(loops))
        return len(loops)

    def dispose(self) -> None:
        """Cancel everything; the scheduler cannot be started again."""
        self._cancel_loops()
        self._disposed = True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_not_disposed(self) -> None:
        if self._disposed:
            raise FleetError("AnimationScheduler has been disposed")

    def _cancel_loops(self) -> dict[str, VehicleAnimation]:
        """Invalidate in-flight starts and cancel every loop; returns the cancelled loops."""
        self._generation += 1
        loops = self._loops
        self._loops = {}
        for loop in loops.values():
            loop.cancel()
        return loops

    async def _start_vehicle(self, trajectory: Trajectory, generation: int) -> bool:
        path = await self._resolve_path(trajectory)
        if generation != self._generation or self._disposed:
            _logger.debug("Discarding stale start for vehicle %s", trajectory.vehicle_id)
            return False

        loop = VehicleAnimation(
            trajectory,
            clock=self._clock,
            renderer=self._renderer,
            segment_duration_ms=self._segment_duration_ms,
            path=path,
        )
        self._loops[trajectory.vehicle_id] = loop
        loop.start()
        return True

    async def _resolve_path(self, trajectory: Trajectory) -> tuple[LatLng, ...]:
        if self._refiner is None:
            return tuple(trajectory.coordinates())

        store_generation = self._store.generation
        cached = self._cache.get(trajectory.vehicle_id, store_generation)
        if cached is not None:
            return cached

        path, refined = await refine_or_fallback(self._refiner, trajectory)
        if refined and store_generation == self._store.generation:
            self._cache.put(trajectory.vehicle_id, store_generation, path)
        return path

    def _park(self, trajectory: Trajectory) -> None:
        """Move a vehicle's marker to its last recorded sample."""
        end = trajectory.end
        if end is None:
            return
        marker = self._renderer.marker(trajectory.vehicle_id)
        if marker is None:
            _logger.debug("No marker to park for vehicle %s", trajectory.vehicle_id)
            return
        position = DisplayedPosition(
            vehicle_id=trajectory.vehicle_id,
            latitude=end.latitude,
            longitude=end.longitude,
            status=end.status,
            tier=classify_status(end.status),
        )
        try:
            marker.move(position)
        except StaleHandleError:
            _logger.debug("Stale marker while parking vehicle %s", trajectory.vehicle_id)

    def _emit_layers(self) -> None:
        self._renderer.clear()
        for trajectory in self._store.all():
            start, end = trajectory.start, trajectory.end
            if start is None or end is None:
                continue
            vehicle_id = trajectory.vehicle_id
            self._renderer.add_layer(
                MapLayer(
                    kind=MapLayerKind.START_MARKER,
                    vehicle_id=vehicle_id,
                    coordinates=(start.position,),
                    label=f"Start of Vehicle ID: {vehicle_id}",
                )
            )
            self._renderer.add_layer(
                MapLayer(
                    kind=MapLayerKind.END_MARKER,
                    vehicle_id=vehicle_id,
                    coordinates=(end.position,),
                    label=f"End of Vehicle ID: {vehicle_id}",
                )
            )
            self._renderer.add_layer(
                MapLayer(
                    kind=MapLayerKind.PATH,
                    vehicle_id=vehicle_id,
                    coordinates=tuple(trajectory.coordinates()),
                    label=f"{trajectory.distance_km:.1f} km",
                )
            )
            if trajectory.is_animatable:
                self._renderer.add_layer(
                    MapLayer(
                        kind=MapLayerKind.ANIMATED_MARKER,
                        vehicle_id=vehicle_id,
                        coordinates=(start.position,),
                        label=f"Vehicle ID: {vehicle_id}",
                    )
                )
