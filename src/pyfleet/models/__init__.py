"""Data models for vehicle trajectories and animation state."""

from pyfleet.models._base import FleetBaseModel
from pyfleet.models.animation import (
    AnimationState,
    DisplayedPosition,
    LoopState,
    MapLayer,
    MapLayerKind,
    StatusTier,
)
from pyfleet.models.geo import HasLatLng, LatLng, haversine_km, path_length_km
from pyfleet.models.trajectory import Sample, Trajectory

__all__ = [
    "AnimationState",
    "DisplayedPosition",
    "FleetBaseModel",
    "HasLatLng",
    "LatLng",
    "LoopState",
    "MapLayer",
    "MapLayerKind",
    "Sample",
    "StatusTier",
    "Trajectory",
    "haversine_km",
    "path_length_km",
]
