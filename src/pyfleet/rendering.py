"""Rendering collaborator interface.

The animation engine never draws anything itself.  It announces static
map layers when trajectories load and moves one marker per animated
vehicle every frame; a :class:`Renderer` turns that into pixels (a web
map, a desktop widget, a log).  :class:`InMemoryRenderer` is the
reference implementation and keeps everything it receives.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from pyfleet.exceptions import StaleHandleError
from pyfleet.models.animation import DisplayedPosition, MapLayer, MapLayerKind


class MarkerHandle(Protocol):
    """A live, movable marker for one vehicle."""

    def move(self, position: DisplayedPosition) -> None:
        """Place the marker; raise :class:`StaleHandleError` if it is gone."""
        ...


class Renderer(Protocol):
    def clear(self) -> None:
        """Remove every layer and marker (a new trajectory set is loading)."""
        ...

    def add_layer(self, layer: MapLayer) -> None:
        ...

    def marker(self, vehicle_id: str) -> MarkerHandle | None:
        """The animated marker for *vehicle_id*, or ``None`` if there is none."""
        ...


@dataclass
class MarkerState:
    """In-memory animated marker."""

    vehicle_id: str
    position: DisplayedPosition | None = None
    update_count: int = 0
    attached: bool = True
    on_move: Callable[[DisplayedPosition], None] | None = field(default=None, repr=False)

    def move(self, position: DisplayedPosition) -> None:
        if not self.attached:
            raise StaleHandleError(f"Marker for vehicle {self.vehicle_id!r} was removed")
        self.position = position
        self.update_count += 1
        if self.on_move is not None:
            self.on_move(position)


class InMemoryRenderer:
    """Renderer that records layers and marker positions.

    Parameters
    ----------
    on_move : callable, optional
        Called with every :class:`DisplayedPosition` a marker receives.
    """

    def __init__(self, *, on_move: Callable[[DisplayedPosition], None] | None = None) -> None:
        self._on_move = on_move
        self._layers: list[MapLayer] = []
        self._markers: dict[str, MarkerState] = {}

    @property
    def layers(self) -> tuple[MapLayer, ...]:
        return tuple(self._layers)

    @property
    def markers(self) -> dict[str, MarkerState]:
        return dict(self._markers)

    def layers_for(self, vehicle_id: str) -> list[MapLayer]:
        return [layer for layer in self._layers if layer.vehicle_id == vehicle_id]

    def clear(self) -> None:
        for marker in self._markers.values():
            marker.attached = False
        self._markers.clear()
        self._layers.clear()

    def add_layer(self, layer: MapLayer) -> None:
        self._layers.append(layer)
        if layer.kind == MapLayerKind.ANIMATED_MARKER:
            previous = self._markers.get(layer.vehicle_id)
            if previous is not None:
                previous.attached = False
            self._markers[layer.vehicle_id] = MarkerState(layer.vehicle_id, on_move=self._on_move)

    def remove_marker(self, vehicle_id: str) -> None:
        """Detach a vehicle's marker; frames for it are skipped from now on."""
        marker = self._markers.pop(vehicle_id, None)
        if marker is not None:
            marker.attached = False

    def marker(self, vehicle_id: str) -> MarkerState | None:
        return self._markers.get(vehicle_id)

    def positions(self) -> dict[str, DisplayedPosition | None]:
        """Last displayed position of every animated marker."""
        return {vehicle_id: marker.position for vehicle_id, marker in self._markers.items()}
