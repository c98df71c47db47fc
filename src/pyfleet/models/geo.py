"""Coordinate pair and great-circle distance helpers."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

#: Mean Earth radius in kilometres.
EARTH_RADIUS_KM = 6371.0088


class HasLatLng(Protocol):
    """Anything carrying a ``latitude`` and a ``longitude`` in degrees."""

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


@dataclass(frozen=True, slots=True)
class LatLng:
    """A coordinate pair in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def of(cls, point: HasLatLng) -> LatLng:
        if isinstance(point, LatLng):
            return point
        return cls(point.latitude, point.longitude)

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


def haversine_km(a: HasLatLng, b: HasLatLng) -> float:
    """Great-circle distance between *a* and *b* in kilometres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def path_length_km(points: Iterable[HasLatLng]) -> float:
    """Sum of great-circle distances along *points* (0.0 for fewer than 2)."""
    total = 0.0
    previous: HasLatLng | None = None
    for point in points:
        if previous is not None:
            total += haversine_km(previous, point)
        previous = point
    return total
