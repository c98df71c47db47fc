"""Client configuration for pyfleet."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyfleet._constants import (
    DEFAULT_FRAME_INTERVAL_MS,
    DEFAULT_SEGMENT_DURATION_MS,
    ROADS_BASE_URL,
    VEHICLES_URL,
)
from pyfleet.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Client configuration.

    Parameters
    ----------
    vehicles_url : str
        URL returning the vehicle trajectory list as JSON.
    default_vehicle_id : str
        Vehicle id used when the payload is a bare list of locations
        (single-vehicle format) and carries no id of its own.
    segment_duration_ms : float
        Time in milliseconds a marker takes to travel from one recorded
        point to the next.
    frame_interval_ms : float
        Interval between frames on the asyncio frame clock.  Defaults to
        a 60 Hz display refresh.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    route_refinement_enabled : bool
        Snap each trajectory to roads before animating it.  Requires
        ``roads_api_key``.
    roads_api_key : str or None
        API key for the Roads ``snapToRoads`` service.
    roads_base_url : str
        Base URL of the Roads service.
    roads_interpolate : bool
        Ask the Roads service to interpolate extra points along the road
        geometry between recorded points.
    """

    vehicles_url: str = VEHICLES_URL
    default_vehicle_id: str = "vehicle-1"
    segment_duration_ms: float = DEFAULT_SEGMENT_DURATION_MS
    frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS
    request_timeout: float = 10.0
    route_refinement_enabled: bool = False
    roads_api_key: str | None = None
    roads_base_url: str = ROADS_BASE_URL
    roads_interpolate: bool = True

    def __post_init__(self) -> None:
        if self.segment_duration_ms <= 0:
            raise FleetConfigError(f"segment_duration_ms must be positive, got {self.segment_duration_ms}")
        if self.frame_interval_ms <= 0:
            raise FleetConfigError(f"frame_interval_ms must be positive, got {self.frame_interval_ms}")
        if self.request_timeout <= 0:
            raise FleetConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.route_refinement_enabled and not self.roads_api_key:
            raise FleetConfigError("route_refinement_enabled requires roads_api_key")

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads optional ``FLEET_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEET_VEHICLES_URL": "vehicles_url",
            "FLEET_DEFAULT_VEHICLE_ID": "default_vehicle_id",
            "FLEET_ROADS_API_KEY": "roads_api_key",
            "FLEET_ROADS_BASE_URL": "roads_base_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields, handled separately
        _ENV_FLOAT_MAP = {
            "FLEET_SEGMENT_DURATION_MS": "segment_duration_ms",
            "FLEET_FRAME_INTERVAL_MS": "frame_interval_ms",
            "FLEET_REQUEST_TIMEOUT": "request_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise FleetConfigError(f"{env_key} must be a number, got {val!r}") from exc

        if "route_refinement_enabled" not in overrides:
            config_kwargs["route_refinement_enabled"] = _env_bool(
                env.get("FLEET_ROUTE_REFINEMENT_ENABLED"),
                False,
            )

        if "roads_interpolate" not in overrides:
            config_kwargs["roads_interpolate"] = _env_bool(env.get("FLEET_ROADS_INTERPOLATE"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
