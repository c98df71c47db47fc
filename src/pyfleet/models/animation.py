"""Animation state, displayed position and map layer models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from pyfleet.models.geo import LatLng


class StatusTier(StrEnum):
    """Discrete state-of-charge category used for marker styling."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LoopState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(slots=True)
class AnimationState:
    """Mutable progress of one vehicle's animation loop.

    Only the owning loop writes to it.  ``segment_index`` is the point
    the vehicle is departing from; the destination is the next point,
    wrapping around at the end of the path.
    """

    segment_index: int = 0
    segment_start_time: float = 0.0
    active: bool = False

    def reset(self) -> None:
        self.segment_index = 0
        self.segment_start_time = 0.0
        self.active = False


@dataclass(frozen=True, slots=True)
class DisplayedPosition:
    """What a marker should show for a vehicle at one instant."""

    vehicle_id: str
    latitude: float
    longitude: float
    status: float
    tier: StatusTier

    @property
    def position(self) -> LatLng:
        return LatLng(self.latitude, self.longitude)

    @property
    def status_text(self) -> str:
        return f"SOC: {self.status:g}%"


class MapLayerKind(StrEnum):
    START_MARKER = "start_marker"
    END_MARKER = "end_marker"
    PATH = "path"
    ANIMATED_MARKER = "animated_marker"


class MapLayer(BaseModel):
    """A static overlay emitted to the renderer when trajectories load."""

    model_config = ConfigDict(frozen=True)

    kind: MapLayerKind
    vehicle_id: str
    coordinates: tuple[LatLng, ...] = Field(default=())
    label: str = ""
