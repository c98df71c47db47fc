"""Best-effort route refinement for the animation engine."""

from __future__ import annotations

import logging

from pyfleet._api.roads import RouteRefiner
from pyfleet.models.geo import LatLng
from pyfleet.models.trajectory import Trajectory

_logger = logging.getLogger(__name__)


async def refine_or_fallback(
    refiner: RouteRefiner | None,
    trajectory: Trajectory,
) -> tuple[tuple[LatLng, ...], bool]:
    """Return the path to animate and whether it was refined.

    Refinement is an enhancement, never a precondition: without a
    refiner, when the refiner raises, or when it returns fewer than two
    points, the raw recorded coordinates are returned.
    """
    raw = tuple(trajectory.coordinates())
    if refiner is None:
        return raw, False

    try:
        refined = await refiner.refine(raw)
    except Exception as exc:
        _logger.warning("Route refinement failed for vehicle %s, using raw path: %s", trajectory.vehicle_id, exc)
        _logger.debug("Route refinement failure detail", exc_info=True)
        return raw, False

    if len(refined) < 2:
        _logger.warning(
            "Route refinement for vehicle %s returned %d point(s), using raw path",
            trajectory.vehicle_id,
            len(refined),
        )
        return raw, False

    return tuple(LatLng.of(point) for point in refined), True
