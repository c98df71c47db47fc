"""In-memory trajectory store.

This is the only component allowed to replace the trajectory set.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from pyfleet.models.trajectory import Trajectory


class TrajectoryStore:
    """Holds the trajectory set for one viewing session.

    The set is replaced wholesale by :meth:`load` and never mutated in
    place: a new mapping is built first and then swapped in, so readers
    either see the previous set or the new one, never a mix.
    """

    def __init__(self, trajectories: Iterable[Trajectory] = ()) -> None:
        self._trajectories: Mapping[str, Trajectory] = MappingProxyType({})
        self._generation = 0
        initial = list(trajectories)
        if initial:
            self.load(initial)

    @property
    def generation(self) -> int:
        """Incremented on every :meth:`load`."""
        return self._generation

    def load(self, trajectories: Iterable[Trajectory]) -> None:
        """Replace the entire trajectory set.

        Raises
        ------
        ValueError
            If two trajectories share a vehicle id.  The current set is
            left untouched in that case.
        """
        self._trajectories = MappingProxyType(self.stage(trajectories))
        self._generation += 1

    @staticmethod
    def stage(trajectories: Iterable[Trajectory]) -> dict[str, Trajectory]:
        """Key *trajectories* by vehicle id without touching any store.

        Raises
        ------
        ValueError
            If two trajectories share a vehicle id.
        """
        staged: dict[str, Trajectory] = {}
        for trajectory in trajectories:
            if trajectory.vehicle_id in staged:
                raise ValueError(f"Duplicate vehicle id {trajectory.vehicle_id!r}")
            staged[trajectory.vehicle_id] = trajectory
        return staged

    def get(self, vehicle_id: str) -> Trajectory | None:
        return self._trajectories.get(vehicle_id)

    def all(self) -> tuple[Trajectory, ...]:
        """Every trajectory, in load order."""
        return tuple(self._trajectories.values())

    def vehicle_ids(self) -> tuple[str, ...]:
        return tuple(self._trajectories.keys())

    def animatable(self) -> tuple[Trajectory, ...]:
        """Trajectories with at least two samples, in load order."""
        return tuple(t for t in self._trajectories.values() if t.is_animatable)

    def __len__(self) -> int:
        return len(self._trajectories)

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._trajectories

    def __iter__(self) -> Iterator[Trajectory]:
        return iter(self.all())
