from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from pyfleet.models.animation import DisplayedPosition, MapLayer, MapLayerKind, StatusTier
from pyfleet.models.geo import LatLng, haversine_km, path_length_km
from pyfleet.models.trajectory import Sample, Trajectory


def test_sample_accepts_payload_aliases() -> None:
    sample = Sample.model_validate({"lat": "12.98", "lng": 77.6, "soc": "85"})

    assert sample.latitude == 12.98
    assert sample.longitude == 77.6
    assert sample.status == 85.0
    assert sample.position == LatLng(12.98, 77.6)


def test_sample_missing_status_defaults_to_zero() -> None:
    assert Sample.model_validate({"latitude": 1.0, "longitude": 2.0}).status == 0.0
    assert Sample.model_validate({"latitude": 1.0, "longitude": 2.0, "soc": "--"}).status == 0.0


@pytest.mark.parametrize(
    "payload",
    [
        {"longitude": 2.0, "soc": 50},
        {"latitude": "--", "longitude": 2.0},
        {"latitude": "north", "longitude": 2.0},
        {"latitude": math.nan, "longitude": 2.0},
    ],
)
def test_sample_without_usable_coordinates_is_rejected(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        Sample.model_validate(payload)


def test_sample_is_frozen() -> None:
    sample = Sample(latitude=1.0, longitude=2.0, status=3.0)
    with pytest.raises(ValidationError):
        sample.status = 4.0  # type: ignore[misc]


def test_trajectory_from_fleet_record() -> None:
    trajectory = Trajectory.model_validate(
        {
            "vehicleId": "  V1 ",
            "locations": [
                {"latitude": 0.0, "longitude": 0.0, "soc": 50},
                {"latitude": 0.0, "longitude": 10.0, "soc": 95},
            ],
        }
    )

    assert trajectory.vehicle_id == "V1"
    assert trajectory.is_animatable
    assert trajectory.start is not None and trajectory.start.status == 50
    assert trajectory.end is not None and trajectory.end.longitude == 10.0
    assert trajectory.coordinates() == [LatLng(0.0, 0.0), LatLng(0.0, 10.0)]


def test_trajectory_requires_vehicle_id() -> None:
    with pytest.raises(ValidationError):
        Trajectory.model_validate({"vehicleId": "   ", "locations": []})


def test_empty_and_single_sample_trajectories_are_not_animatable() -> None:
    empty = Trajectory(vehicle_id="E")
    single = Trajectory(vehicle_id="S", samples=(Sample(latitude=1.0, longitude=1.0),))

    assert not empty.is_animatable
    assert empty.start is None and empty.end is None
    assert empty.distance_km == 0.0
    assert not single.is_animatable
    assert single.start == single.end


def test_haversine_one_degree_on_equator() -> None:
    assert haversine_km(LatLng(0.0, 0.0), LatLng(0.0, 1.0)) == pytest.approx(111.195, abs=0.01)
    assert haversine_km(LatLng(5.0, 5.0), LatLng(5.0, 5.0)) == 0.0


def test_path_length_sums_segments() -> None:
    points = [LatLng(0.0, 0.0), LatLng(0.0, 1.0), LatLng(0.0, 2.0)]
    assert path_length_km(points) == pytest.approx(2 * haversine_km(points[0], points[1]))
    assert path_length_km(points[:1]) == 0.0


def test_displayed_position_status_text() -> None:
    position = DisplayedPosition(vehicle_id="V1", latitude=1.0, longitude=2.0, status=87.5, tier=StatusTier.MEDIUM)

    assert position.status_text == "SOC: 87.5%"
    assert position.position == LatLng(1.0, 2.0)
    assert DisplayedPosition("V1", 1.0, 2.0, 100.0, StatusTier.HIGH).status_text == "SOC: 100%"


def test_map_layer_is_immutable() -> None:
    layer = MapLayer(kind=MapLayerKind.PATH, vehicle_id="V1", coordinates=(LatLng(0.0, 0.0), LatLng(1.0, 1.0)))

    assert layer.coordinates[1] == LatLng(1.0, 1.0)
    with pytest.raises(ValidationError):
        layer.label = "changed"  # type: ignore[misc]
