"""Snap-to-roads route refinement.

Endpoint:
  - /v1/snapToRoads (GET, ``path=lat,lng|lat,lng|...``)

The service accepts at most 100 points per request.  Longer paths are
sent in chunks that overlap by one point and stitched back together.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from pyfleet._constants import SNAP_TO_ROADS_ENDPOINT, SNAP_TO_ROADS_MAX_POINTS
from pyfleet._transport import Transport
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetConfigError, FleetTransportError, RefinementError
from pyfleet.ingestion.normalize import safe_float
from pyfleet.models.geo import LatLng

_logger = logging.getLogger(__name__)


class RouteRefiner(Protocol):
    """Turns a raw recorded path into a denser, road-aligned path.

    Implementations may return more or fewer points than they were given
    and raise any exception on failure; the animation engine falls back
    to the raw path.
    """

    async def refine(self, path: Sequence[LatLng]) -> list[LatLng]:
        ...


def _format_path(points: Sequence[LatLng]) -> str:
    return "|".join(f"{p.latitude},{p.longitude}" for p in points)


def _chunks(points: Sequence[LatLng], size: int) -> list[Sequence[LatLng]]:
    """Split *points* into chunks of at most *size*, sharing boundary points."""
    if len(points) <= size:
        return [points]
    chunks: list[Sequence[LatLng]] = []
    start = 0
    while True:
        chunks.append(points[start : start + size])
        if start + size >= len(points):
            break
        start += size - 1
    return chunks


def parse_snapped_points(payload: Any) -> list[LatLng]:
    """Parse a snapToRoads response body.

    Raises
    ------
    RefinementError
        If the body reports an error or carries no usable points.
    """
    if not isinstance(payload, dict):
        raise RefinementError("snapToRoads response is not an object")

    error = payload.get("error")
    if error is not None:
        message = error.get("message", "") if isinstance(error, dict) else str(error)
        raise RefinementError(f"snapToRoads failed: {message}")

    raw_points = payload.get("snappedPoints")
    if not isinstance(raw_points, list) or not raw_points:
        raise RefinementError("snapToRoads response has no snappedPoints")

    points: list[LatLng] = []
    for item in raw_points:
        location = item.get("location") if isinstance(item, dict) else None
        if not isinstance(location, dict):
            continue
        lat = safe_float(location.get("latitude"))
        lng = safe_float(location.get("longitude"))
        if lat is None or lng is None:
            continue
        points.append(LatLng(lat, lng))

    if not points:
        raise RefinementError("snapToRoads response has no usable snappedPoints")
    return points


class RoadsRefiner:
    """Route refiner backed by the Roads ``snapToRoads`` service."""

    def __init__(
        self,
        config: FleetConfig,
        transport: Transport,
        *,
        max_points: int = SNAP_TO_ROADS_MAX_POINTS,
    ) -> None:
        if not config.roads_api_key:
            raise FleetConfigError("RoadsRefiner requires config.roads_api_key")
        if max_points < 2:
            raise ValueError(f"max_points must be at least 2, got {max_points}")
        self._config = config
        self._transport = transport
        self._max_points = max_points

    async def refine(self, path: Sequence[LatLng]) -> list[LatLng]:
        if len(path) < 2:
            return list(path)

        refined: list[LatLng] = []
        for chunk in _chunks(path, self._max_points):
            snapped = await self._snap(chunk)
            if refined and snapped[0] == refined[-1]:
                snapped = snapped[1:]
            refined.extend(snapped)

        _logger.debug("Snapped %d points to %d road points", len(path), len(refined))
        return refined

    async def _snap(self, chunk: Sequence[LatLng]) -> list[LatLng]:
        url = f"{self._config.roads_base_url.rstrip('/')}{SNAP_TO_ROADS_ENDPOINT}"
        params = {
            "path": _format_path(chunk),
            "interpolate": "true" if self._config.roads_interpolate else "false",
            "key": self._config.roads_api_key or "",
        }
        try:
            payload = await self._transport.get_json(url, params=params)
        except FleetTransportError as exc:
            raise RefinementError(f"snapToRoads request failed: {exc}") from exc
        return parse_snapped_points(payload)
