"""High-level async client tying data, refinement and animation together."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import aiohttp

from pyfleet._api.roads import RoadsRefiner, RouteRefiner
from pyfleet._api.vehicles import fetch_trajectories
from pyfleet._transport import HttpTransport
from pyfleet.animation.frames import AsyncioFrameClock, FrameClock
from pyfleet.animation.scheduler import AnimationScheduler
from pyfleet.config import FleetConfig
from pyfleet.exceptions import DataFetchError, FleetError
from pyfleet.ingestion.vehicles import read_dataset
from pyfleet.models.trajectory import Trajectory
from pyfleet.rendering import InMemoryRenderer, Renderer
from pyfleet.state.store import TrajectoryStore

_logger = logging.getLogger(__name__)


class FleetClient:
    """Async client animating a fleet of recorded vehicle trajectories.

    Usage::

        async with FleetClient(config, renderer=renderer) as client:
            await client.refresh()
            await client.start()
            ...
            client.stop()

    Parameters
    ----------
    config : FleetConfig
        Client configuration.
    renderer : Renderer, optional
        Rendering collaborator.  Defaults to an :class:`InMemoryRenderer`.
    session : aiohttp.ClientSession, optional
        Externally owned HTTP session; it is not closed on exit.
    clock : FrameClock, optional
        Frame clock.  Defaults to an :class:`AsyncioFrameClock` ticking
        every ``config.frame_interval_ms``.
    refiner : RouteRefiner, optional
        Route refiner.  Defaults to a :class:`RoadsRefiner` when
        ``config.route_refinement_enabled`` is set, otherwise none.
    """

    def __init__(
        self,
        config: FleetConfig,
        *,
        renderer: Renderer | None = None,
        session: aiohttp.ClientSession | None = None,
        clock: FrameClock | None = None,
        refiner: RouteRefiner | None = None,
    ) -> None:
        self._config = config
        self._renderer: Renderer = renderer if renderer is not None else InMemoryRenderer()
        self._external_session = session is not None
        self._http_session = session
        self._clock = clock
        self._owns_clock = False
        self._refiner = refiner
        self._transport: HttpTransport | None = None
        self._scheduler: AnimationScheduler | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)

        if self._clock is None:
            self._clock = AsyncioFrameClock(self._config.frame_interval_ms)
            self._owns_clock = True

        refiner = self._refiner
        if refiner is None and self._config.route_refinement_enabled:
            refiner = RoadsRefiner(self._config, self._transport)

        self._scheduler = AnimationScheduler(
            self._renderer,
            self._clock,
            store=TrajectoryStore(),
            segment_duration_ms=self._config.segment_duration_ms,
            refiner=refiner,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._scheduler is not None:
            self._scheduler.dispose()
            self._scheduler = None
        if self._owns_clock and isinstance(self._clock, AsyncioFrameClock):
            self._clock.close()
            self._clock = None
            self._owns_clock = False
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> FleetConfig:
        return self._config

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def scheduler(self) -> AnimationScheduler:
        return self._require_scheduler()

    @property
    def store(self) -> TrajectoryStore:
        return self._require_scheduler().store

    @property
    def is_animating(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_running

    def _require_scheduler(self) -> AnimationScheduler:
        if self._scheduler is None:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._scheduler

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    async def refresh(self) -> int:
        """Fetch trajectories from ``config.vehicles_url`` and load them.

        A failed fetch is logged and leaves an empty trajectory set.
        Returns the number of vehicles loaded.
        """
        scheduler = self._require_scheduler()
        transport = self._require_transport()
        try:
            trajectories = await fetch_trajectories(self._config, transport)
        except DataFetchError as exc:
            _logger.warning("Vehicle fetch failed, showing no vehicles: %s", exc)
            trajectories = []
        scheduler.load(trajectories)
        return len(trajectories)

    def load(self, trajectories: Iterable[Trajectory]) -> int:
        """Load an in-memory trajectory set."""
        scheduler = self._require_scheduler()
        scheduler.load(trajectories)
        return len(scheduler.store)

    def load_file(self, path: str | Path) -> int:
        """Load a static JSON/GeoJSON dataset.

        An unreadable file is logged and leaves an empty trajectory set.
        """
        try:
            trajectories = read_dataset(path, default_vehicle_id=self._config.default_vehicle_id)
        except DataFetchError as exc:
            _logger.warning("Dataset load failed, showing no vehicles: %s", exc)
            trajectories = []
        return self.load(trajectories)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    async def start(self) -> int:
        """Start animating every vehicle; returns the number of loops started."""
        return await self._require_scheduler().start_all()

    def stop(self) -> int:
        """Stop animating and park every vehicle at the end of its route."""
        return self._require_scheduler().stop_all()

    async def toggle(self) -> bool:
        """Start when stopped, stop when running; returns whether it is now animating."""
        if self.is_animating:
            self.stop()
            return False
        return await self.start() > 0
