"""Recorded sample and trajectory models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyfleet.ingestion.normalize import safe_float, safe_str
from pyfleet.models._base import FleetBaseModel
from pyfleet.models.geo import LatLng, path_length_km


class Sample(FleetBaseModel):
    """One recorded observation of a vehicle.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    status : float
        State-of-charge in percent (expected 0-100).  Defaults to ``0.0``
        when the source omits it.
    """

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat", "gpsLatitude"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon", "gpsLongitude"))
    status: float = Field(default=0.0, validation_alias=AliasChoices("status", "soc", "elecPercent"))

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @property
    def position(self) -> LatLng:
        return LatLng(self.latitude, self.longitude)


class Trajectory(FleetBaseModel):
    """The ordered samples recorded for one vehicle.

    Index 0 is the start of the route and the last index is its end.
    Sample order is the recording order and is never changed.
    """

    vehicle_id: str = Field(validation_alias=AliasChoices("vehicle_id", "vehicleId", "id"))
    samples: tuple[Sample, ...] = Field(default=(), validation_alias=AliasChoices("samples", "locations"))

    @field_validator("vehicle_id", mode="before")
    @classmethod
    def _normalize_vehicle_id(cls, value: Any) -> str:
        vehicle_id = safe_str(value)
        if vehicle_id is None:
            raise ValueError("vehicle_id must be non-empty")
        return vehicle_id

    @property
    def is_animatable(self) -> bool:
        """Whether there are enough samples for meaningful motion."""
        return len(self.samples) >= 2

    @property
    def start(self) -> Sample | None:
        return self.samples[0] if self.samples else None

    @property
    def end(self) -> Sample | None:
        return self.samples[-1] if self.samples else None

    def coordinates(self) -> list[LatLng]:
        """Raw recorded coordinates, in recording order."""
        return [sample.position for sample in self.samples]

    @property
    def distance_km(self) -> float:
        """Great-circle length of the recorded route."""
        return path_length_km(self.samples)
