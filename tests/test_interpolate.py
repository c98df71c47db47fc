from __future__ import annotations

import pytest

from pyfleet.animation.interpolate import interpolate
from pyfleet.models.geo import LatLng
from pyfleet.models.trajectory import Sample

A = LatLng(12.983693457, 77.603524403)
B = LatLng(12.991, 77.612)


def test_progress_zero_returns_start_exactly() -> None:
    assert interpolate(A, B, 0.0) == A


def test_midpoint_is_exact_average() -> None:
    mid = interpolate(A, B, 0.5)

    assert mid.latitude == pytest.approx((A.latitude + B.latitude) / 2, abs=1e-12)
    assert mid.longitude == pytest.approx((A.longitude + B.longitude) / 2, abs=1e-12)


def test_progress_approaching_one_converges_to_end() -> None:
    near_end = interpolate(A, B, 1 - 1e-9)

    assert near_end.latitude == pytest.approx(B.latitude, abs=1e-9)
    assert near_end.longitude == pytest.approx(B.longitude, abs=1e-9)


def test_interpolation_is_planar_in_degrees() -> None:
    assert interpolate(LatLng(0.0, 0.0), LatLng(0.0, 10.0), 0.5) == LatLng(0.0, 5.0)
    assert interpolate(LatLng(60.0, 0.0), LatLng(60.0, 90.0), 0.25) == LatLng(60.0, 22.5)


def test_accepts_samples_and_extrapolates_outside_unit_range() -> None:
    a = Sample(latitude=1.0, longitude=2.0, status=50)
    b = Sample(latitude=3.0, longitude=6.0, status=60)

    assert interpolate(a, b, 2.0) == LatLng(5.0, 10.0)
    assert interpolate(a, b, -1.0) == LatLng(-1.0, -2.0)
