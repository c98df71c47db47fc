from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyfleet._api.roads import RoadsRefiner, parse_snapped_points
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetConfigError, FleetTransportError, RefinementError
from pyfleet.models.geo import LatLng


def _snapped(points: list[tuple[float, float]]) -> dict[str, Any]:
    return {
        "snappedPoints": [
            {"location": {"latitude": lat, "longitude": lng}, "placeId": f"p{i}"} for i, (lat, lng) in enumerate(points)
        ]
    }


@dataclass
class EchoTransport:
    """Snaps every point onto itself and records each request."""

    requests: list[tuple[str, dict[str, str]]] = field(default_factory=list)

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        assert params is not None
        self.requests.append((url, dict(params)))
        points = [tuple(float(part) for part in pair.split(",")) for pair in params["path"].split("|")]
        return _snapped(points)  # type: ignore[arg-type]


@dataclass
class StaticTransport:
    payload: Any = None
    error: Exception | None = None

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        if self.error is not None:
            raise self.error
        return self.payload


def _config(**overrides: Any) -> FleetConfig:
    values: dict[str, Any] = {"roads_api_key": "test-key", "roads_base_url": "https://roads.test/"}
    values.update(overrides)
    return FleetConfig(**values)


def _line(count: int) -> list[LatLng]:
    return [LatLng(0.0, float(i)) for i in range(count)]


@pytest.mark.asyncio
async def test_refine_sends_lat_lng_path_and_key() -> None:
    transport = EchoTransport()
    refiner = RoadsRefiner(_config(), transport)

    refined = await refiner.refine([LatLng(12.5, 77.25), LatLng(12.75, 77.5)])

    assert refined == [LatLng(12.5, 77.25), LatLng(12.75, 77.5)]
    ((url, params),) = transport.requests
    assert url == "https://roads.test/v1/snapToRoads"
    assert params == {"path": "12.5,77.25|12.75,77.5", "interpolate": "true", "key": "test-key"}


@pytest.mark.asyncio
async def test_interpolate_flag_follows_config() -> None:
    transport = EchoTransport()
    refiner = RoadsRefiner(_config(roads_interpolate=False), transport)

    await refiner.refine(_line(2))

    assert transport.requests[0][1]["interpolate"] == "false"


@pytest.mark.asyncio
async def test_long_paths_are_chunked_and_stitched() -> None:
    transport = EchoTransport()
    refiner = RoadsRefiner(_config(), transport, max_points=3)

    refined = await refiner.refine(_line(5))

    assert [params["path"] for _url, params in transport.requests] == [
        "0.0,0.0|0.0,1.0|0.0,2.0",
        "0.0,2.0|0.0,3.0|0.0,4.0",
    ]
    assert refined == _line(5)


@pytest.mark.asyncio
async def test_short_path_is_returned_without_request() -> None:
    transport = EchoTransport()
    refiner = RoadsRefiner(_config(), transport)

    assert await refiner.refine([LatLng(1.0, 1.0)]) == [LatLng(1.0, 1.0)]
    assert transport.requests == []


@pytest.mark.asyncio
async def test_transport_failure_becomes_refinement_error() -> None:
    transport = StaticTransport(error=FleetTransportError("HTTP 403", status_code=403))
    refiner = RoadsRefiner(_config(), transport)

    with pytest.raises(RefinementError):
        await refiner.refine(_line(3))


@pytest.mark.asyncio
async def test_error_body_becomes_refinement_error() -> None:
    transport = StaticTransport(payload={"error": {"code": 400, "message": "API key not valid"}})
    refiner = RoadsRefiner(_config(), transport)

    with pytest.raises(RefinementError, match="API key not valid"):
        await refiner.refine(_line(3))


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {},
        {"snappedPoints": []},
        {"snappedPoints": [{"location": {"latitude": "--"}}, {"placeId": "x"}]},
    ],
)
def test_unusable_responses_raise(payload: Any) -> None:
    with pytest.raises(RefinementError):
        parse_snapped_points(payload)


def test_parse_skips_bad_points() -> None:
    payload = _snapped([(1.0, 2.0)])
    payload["snappedPoints"].append({"location": {"latitude": None, "longitude": 3.0}})

    assert parse_snapped_points(payload) == [LatLng(1.0, 2.0)]


def test_refiner_requires_api_key() -> None:
    with pytest.raises(FleetConfigError):
        RoadsRefiner(FleetConfig(), StaticTransport())


def test_refiner_rejects_tiny_chunks() -> None:
    with pytest.raises(ValueError):
        RoadsRefiner(_config(), StaticTransport(), max_points=1)
