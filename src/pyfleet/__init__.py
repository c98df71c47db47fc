"""pyfleet - Async engine animating vehicle fleets along recorded GPS trajectories."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfleet")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfleet._api.roads import RoadsRefiner, RouteRefiner
from pyfleet.animation import (
    AnimationScheduler,
    AsyncioFrameClock,
    FrameClock,
    ManualFrameClock,
    VehicleAnimation,
    classify_status,
    interpolate,
)
from pyfleet.client import FleetClient
from pyfleet.config import FleetConfig
from pyfleet.exceptions import (
    DataFetchError,
    DegenerateTrajectoryError,
    FleetConfigError,
    FleetError,
    FleetTransportError,
    RefinementError,
    StaleHandleError,
)
from pyfleet.ingestion.vehicles import parse_trajectories, read_dataset
from pyfleet.models import (
    AnimationState,
    DisplayedPosition,
    LatLng,
    LoopState,
    MapLayer,
    MapLayerKind,
    Sample,
    StatusTier,
    Trajectory,
)
from pyfleet.rendering import InMemoryRenderer, MarkerHandle, Renderer
from pyfleet.state.store import TrajectoryStore

__all__ = [
    "__version__",
    "AnimationScheduler",
    "AnimationState",
    "AsyncioFrameClock",
    "DataFetchError",
    "DegenerateTrajectoryError",
    "DisplayedPosition",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "FleetTransportError",
    "FrameClock",
    "InMemoryRenderer",
    "LatLng",
    "LoopState",
    "ManualFrameClock",
    "MapLayer",
    "MapLayerKind",
    "MarkerHandle",
    "RefinementError",
    "Renderer",
    "RoadsRefiner",
    "RouteRefiner",
    "Sample",
    "StaleHandleError",
    "StatusTier",
    "Trajectory",
    "TrajectoryStore",
    "VehicleAnimation",
    "classify_status",
    "interpolate",
    "parse_trajectories",
    "read_dataset",
]
