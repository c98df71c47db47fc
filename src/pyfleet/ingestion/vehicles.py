"""Vehicle payload ingestion + parsing.

Three payload shapes are accepted:

* fleet format: ``[{"vehicleId": ..., "locations": [{latitude, longitude, soc}, ...]}, ...]``
* single-vehicle format: ``[{latitude, longitude, soc}, ...]``
* GeoJSON ``FeatureCollection`` of ``Point`` features carrying
  ``properties.vehicle_id`` and ``properties.soc``
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pyfleet.exceptions import DataFetchError
from pyfleet.ingestion.normalize import first_present, safe_str
from pyfleet.models.trajectory import Sample, Trajectory

_logger = logging.getLogger(__name__)

_VEHICLE_ID_KEYS = ("vehicleId", "vehicle_id", "id")
_LOCATION_LIST_KEYS = ("locations", "samples", "path")
_COORDINATE_KEYS = ("latitude", "lat", "gpsLatitude")


def _parse_samples(raw: Any, vehicle_id: str) -> tuple[Sample, ...]:
    """Validate each location, dropping the ones without usable coordinates."""
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        return ()
    samples: list[Sample] = []
    dropped = 0
    for item in raw:
        if not isinstance(item, Mapping):
            dropped += 1
            continue
        try:
            samples.append(Sample.model_validate(dict(item)))
        except ValidationError:
            dropped += 1
    if dropped:
        _logger.debug("Dropped %d unusable sample(s) for vehicle %s", dropped, vehicle_id)
    return tuple(samples)


def _looks_like_vehicle(item: Mapping[str, Any]) -> bool:
    return any(key in item for key in _LOCATION_LIST_KEYS)


def _looks_like_location(item: Mapping[str, Any]) -> bool:
    return any(key in item for key in _COORDINATE_KEYS)


def _dedupe(trajectories: list[Trajectory]) -> list[Trajectory]:
    seen: set[str] = set()
    unique: list[Trajectory] = []
    for trajectory in trajectories:
        if trajectory.vehicle_id in seen:
            _logger.warning("Ignoring duplicate trajectory for vehicle %s", trajectory.vehicle_id)
            continue
        seen.add(trajectory.vehicle_id)
        unique.append(trajectory)
    return unique


def _parse_fleet(items: Sequence[Mapping[str, Any]]) -> list[Trajectory]:
    trajectories: list[Trajectory] = []
    for index, item in enumerate(items):
        explicit_id = safe_str(first_present(item, *_VEHICLE_ID_KEYS))
        if explicit_id is None and not _looks_like_vehicle(item):
            _logger.debug("Skipping fleet entry %d: no vehicle id and no locations", index)
            continue
        vehicle_id = explicit_id or f"vehicle-{index + 1}"
        raw_locations = first_present(item, *_LOCATION_LIST_KEYS)
        trajectories.append(Trajectory(vehicle_id=vehicle_id, samples=_parse_samples(raw_locations, vehicle_id)))
    return _dedupe(trajectories)


def _parse_feature_collection(payload: Mapping[str, Any], default_vehicle_id: str) -> list[Trajectory]:
    features = payload.get("features")
    if not isinstance(features, list):
        raise DataFetchError("GeoJSON payload has no 'features' list")

    grouped: dict[str, list[dict[str, Any]]] = {}
    for feature in features:
        if not isinstance(feature, Mapping):
            continue
        properties = feature.get("properties")
        props: Mapping[str, Any] = properties if isinstance(properties, Mapping) else {}
        geometry = feature.get("geometry")
        if not isinstance(geometry, Mapping):
            continue
        coordinates = geometry.get("coordinates")
        if not isinstance(coordinates, Sequence) or len(coordinates) < 2:
            continue

        vehicle_id = safe_str(first_present(props, *_VEHICLE_ID_KEYS)) or default_vehicle_id
        # GeoJSON positions are [longitude, latitude].
        location = {
            "longitude": coordinates[0],
            "latitude": coordinates[1],
            "soc": first_present(props, "soc", "status"),
        }
        grouped.setdefault(vehicle_id, []).append(location)

    return [
        Trajectory(vehicle_id=vehicle_id, samples=_parse_samples(locations, vehicle_id))
        for vehicle_id, locations in grouped.items()
    ]


def parse_trajectories(payload: Any, *, default_vehicle_id: str = "vehicle-1") -> list[Trajectory]:
    """Parse a decoded vehicle payload into trajectories.

    Parameters
    ----------
    payload : Any
        Decoded JSON (list or dict).
    default_vehicle_id : str
        Id given to a single-vehicle location list, or to GeoJSON
        features without a vehicle id.

    Returns
    -------
    list[Trajectory]
        Trajectories in payload order, unique by vehicle id.  Vehicles
        with no usable samples are kept (with zero samples) so the caller
        sees the full fleet.

    Raises
    ------
    DataFetchError
        If the payload matches none of the accepted shapes.
    """
    if isinstance(payload, Mapping):
        if payload.get("type") == "FeatureCollection" or "features" in payload:
            return _parse_feature_collection(payload, default_vehicle_id)
        wrapped = payload.get("vehicles")
        if not isinstance(wrapped, list):
            raise DataFetchError("Unrecognised vehicle payload: expected a list or a GeoJSON FeatureCollection")
        payload = wrapped

    if not isinstance(payload, list):
        raise DataFetchError(f"Unrecognised vehicle payload of type {type(payload).__name__}")

    items = [item for item in payload if isinstance(item, Mapping)]
    if not items:
        return []
    if any(_looks_like_vehicle(item) for item in items):
        return _parse_fleet(items)
    if any(_looks_like_location(item) for item in items):
        return [Trajectory(vehicle_id=default_vehicle_id, samples=_parse_samples(items, default_vehicle_id))]
    raise DataFetchError("Unrecognised vehicle payload: items carry neither locations nor coordinates")


def read_dataset(path: str | Path, *, default_vehicle_id: str = "vehicle-1") -> list[Trajectory]:
    """Read trajectories from a JSON or GeoJSON file."""
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DataFetchError(f"Cannot read dataset {source}: {exc}", endpoint=str(source)) from exc
    except json.JSONDecodeError as exc:
        raise DataFetchError(f"Invalid JSON in dataset {source}: {exc}", endpoint=str(source)) from exc
    return parse_trajectories(payload, default_vehicle_id=default_vehicle_id)
