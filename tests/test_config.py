from __future__ import annotations

import pytest

from pyfleet._constants import DEFAULT_SEGMENT_DURATION_MS, VEHICLES_URL
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetConfigError

_FLEET_ENV = (
    "FLEET_VEHICLES_URL",
    "FLEET_DEFAULT_VEHICLE_ID",
    "FLEET_ROADS_API_KEY",
    "FLEET_ROADS_BASE_URL",
    "FLEET_SEGMENT_DURATION_MS",
    "FLEET_FRAME_INTERVAL_MS",
    "FLEET_REQUEST_TIMEOUT",
    "FLEET_ROUTE_REFINEMENT_ENABLED",
    "FLEET_ROADS_INTERPOLATE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _FLEET_ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = FleetConfig.from_env()

    assert config.vehicles_url == VEHICLES_URL
    assert config.segment_duration_ms == DEFAULT_SEGMENT_DURATION_MS
    assert config.frame_interval_ms == pytest.approx(1000 / 60)
    assert not config.route_refinement_enabled
    assert config.roads_interpolate
    assert config.roads_api_key is None


def test_env_values_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_VEHICLES_URL", "http://fleet.test/vehicles")
    monkeypatch.setenv("FLEET_SEGMENT_DURATION_MS", "2000")
    monkeypatch.setenv("FLEET_ROUTE_REFINEMENT_ENABLED", "yes")
    monkeypatch.setenv("FLEET_ROADS_API_KEY", "abc")
    monkeypatch.setenv("FLEET_ROADS_INTERPOLATE", "off")

    config = FleetConfig.from_env()

    assert config.vehicles_url == "http://fleet.test/vehicles"
    assert config.segment_duration_ms == 2000.0
    assert config.route_refinement_enabled
    assert config.roads_api_key == "abc"
    assert not config.roads_interpolate


def test_overrides_beat_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_SEGMENT_DURATION_MS", "not-a-number")
    monkeypatch.setenv("FLEET_DEFAULT_VEHICLE_ID", "from-env")

    config = FleetConfig.from_env(segment_duration_ms=500.0, default_vehicle_id="explicit")

    assert config.segment_duration_ms == 500.0
    assert config.default_vehicle_id == "explicit"


def test_invalid_number_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_REQUEST_TIMEOUT", "soon")

    with pytest.raises(FleetConfigError, match="FLEET_REQUEST_TIMEOUT"):
        FleetConfig.from_env()


def test_unknown_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_ROADS_INTERPOLATE", "maybe")

    assert FleetConfig.from_env().roads_interpolate


@pytest.mark.parametrize(
    "kwargs",
    [
        {"segment_duration_ms": 0},
        {"frame_interval_ms": -1},
        {"request_timeout": 0},
        {"route_refinement_enabled": True},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig(**kwargs)  # type: ignore[arg-type]


def test_config_is_frozen() -> None:
    config = FleetConfig()
    with pytest.raises(AttributeError):
        config.segment_duration_ms = 1.0  # type: ignore[misc]
