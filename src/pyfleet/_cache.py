"""Internal cache of refined (road-snapped) paths."""

from __future__ import annotations

from dataclasses import dataclass, field

from pyfleet.models.geo import LatLng


@dataclass
class RefinedPathEntry:
    """Refined path for a single vehicle, tied to a store generation."""

    generation: int
    path: tuple[LatLng, ...] = field(default_factory=tuple)


class RefinedPathCache:
    """Remember successful refinements so restarts skip the service call.

    Entries from an older store generation are treated as missing: a reload
    may bring a different route under the same vehicle id.
    """

    def __init__(self) -> None:
        self._paths: dict[str, RefinedPathEntry] = {}

    def get(self, vehicle_id: str, generation: int) -> tuple[LatLng, ...] | None:
        entry = self._paths.get(vehicle_id)
        if entry is None or entry.generation != generation:
            return None
        return entry.path

    def put(self, vehicle_id: str, generation: int, path: tuple[LatLng, ...]) -> None:
        self._paths[vehicle_id] = RefinedPathEntry(generation=generation, path=path)

    def clear(self) -> None:
        self._paths.clear()

    def __len__(self) -> int:
        return len(self._paths)
