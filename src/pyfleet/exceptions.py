"""Custom exception hierarchy for pyfleet."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all pyfleet errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetTransportError(FleetError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class DataFetchError(FleetError):
    """Vehicle trajectories could not be fetched or parsed.

    Callers that own a trajectory store recover by loading an empty set;
    this error is never meant to stop the process.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class RefinementError(FleetError):
    """Route refinement (snap-to-roads) failed.

    The animation engine falls back to the raw recorded coordinates.
    """


class StaleHandleError(FleetError):
    """A rendering handle is no longer attached to a live marker."""


class DegenerateTrajectoryError(FleetError):
    """A trajectory has fewer than two points and cannot be animated."""

    def __init__(self, vehicle_id: str, point_count: int) -> None:
        self.vehicle_id = vehicle_id
        self.point_count = point_count
        super().__init__(f"Vehicle {vehicle_id!r} has {point_count} point(s); at least 2 are needed to animate")
