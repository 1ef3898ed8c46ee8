"""Reverse dependency index for formula cells."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from gridcalc._address import Address


class DependencyGraph:
    """Tracks which cells read from each cell (reverse edges).

    The forward set of each formula lives on the cell itself; this index is
    derived from it and updated incrementally. A referenced address with no
    remaining dependents is dropped, never kept as an empty set.
    """

    __slots__ = ("_dependents",)

    def __init__(self) -> None:
        # cell -> set of cells whose formulas reference it
        self._dependents: dict[Address, set[Address]] = {}

    def get_dependents(self, address: Address) -> frozenset[Address]:
        """Cells that directly reference *address* (empty if none)."""
        return frozenset(self._dependents.get(address, ()))

    def remove_outgoing_edges(self, address: Address, old_depends_on: Iterable[Address]) -> None:
        """Drop *address* from the dependents of every cell it used to read."""
        for dep in old_depends_on:
            dependents = self._dependents.get(dep)
            if dependents is None:
                continue
            dependents.discard(address)
            if not dependents:
                del self._dependents[dep]

    def add_outgoing_edges(self, address: Address, new_depends_on: Iterable[Address]) -> None:
        """Register *address* as a dependent of every cell it now reads."""
        for dep in new_depends_on:
            if dep not in self._dependents:
                self._dependents[dep] = set()
            self._dependents[dep].add(address)

    def transitive_dependents(self, address: Address) -> list[Address]:
        """All cells reachable through dependents edges, breadth-first.

        *address* itself is only included when it sits on a cycle.
        """
        found: list[Address] = []
        visited: set[Address] = set()
        queue: deque[Address] = deque([address])

        while queue:
            cell = queue.popleft()
            for dep in sorted(self._dependents.get(cell, ())):
                if dep not in visited:
                    visited.add(dep)
                    found.append(dep)
                    queue.append(dep)

        return found

    def edge_count(self) -> int:
        return sum(len(deps) for deps in self._dependents.values())

    def __contains__(self, address: object) -> bool:
        return address in self._dependents

    def __len__(self) -> int:
        return len(self._dependents)

    def __repr__(self) -> str:
        return f"<DependencyGraph nodes={len(self)} edges={self.edge_count()}>"
