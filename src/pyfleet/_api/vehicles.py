"""Vehicle list endpoint.

Fetches the fleet's recorded trajectories from ``config.vehicles_url``.
"""

from __future__ import annotations

import logging

from pyfleet._redact import redact_url
from pyfleet._transport import Transport
from pyfleet.config import FleetConfig
from pyfleet.exceptions import DataFetchError, FleetTransportError
from pyfleet.ingestion.vehicles import parse_trajectories
from pyfleet.models.trajectory import Trajectory

_logger = logging.getLogger(__name__)


async def fetch_trajectories(config: FleetConfig, transport: Transport) -> list[Trajectory]:
    """Fetch and parse the vehicle trajectory list.

    Returns
    -------
    list[Trajectory]
        Trajectories in payload order.

    Raises
    ------
    DataFetchError
        If the request fails or the payload is not a recognised shape.
    """
    endpoint = redact_url(config.vehicles_url)
    try:
        payload = await transport.get_json(config.vehicles_url)
    except FleetTransportError as exc:
        raise DataFetchError(f"Vehicle list unavailable: {exc}", endpoint=endpoint) from exc

    try:
        trajectories = parse_trajectories(payload, default_vehicle_id=config.default_vehicle_id)
    except DataFetchError as exc:
        exc.endpoint = endpoint
        raise

    _logger.debug(
        "Fetched %d trajectories (%d samples) from %s",
        len(trajectories),
        sum(len(t.samples) for t in trajectories),
        endpoint,
    )
    return trajectories
