"""Planar interpolation between two recorded positions."""

from __future__ import annotations

from pyfleet.models.geo import HasLatLng, LatLng


def interpolate(a: HasLatLng, b: HasLatLng, progress: float) -> LatLng:
    """Point at *progress* along the straight line from *a* to *b*.

    Latitude and longitude are interpolated independently as plain
    degrees, with no geodesic correction.  ``progress`` is expected in
    ``[0, 1)``; other values extrapolate along the same line.
    """
    lat = a.latitude + (b.latitude - a.latitude) * progress
    lng = a.longitude + (b.longitude - a.longitude) * progress
    return LatLng(lat, lng)
