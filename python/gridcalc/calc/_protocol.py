"""CalcEngine protocol and result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gridcalc._address import Address

if TYPE_CHECKING:
    from gridcalc._cell import Cell


@dataclass(frozen=True)
class CellDelta:
    """A single cell's display change within one update batch."""

    address: Address
    old_value: str
    new_value: str
    content: str  # raw content the new value was computed from

    @property
    def changed(self) -> bool:
        return self.old_value != self.new_value


@dataclass(frozen=True)
class RecalcResult:
    """Result of one edit and everything it rippled into."""

    edited: Address
    deltas: tuple[CellDelta, ...]  # every recomputed cell, in processing order

    @property
    def recomputed(self) -> tuple[Address, ...]:
        return tuple(d.address for d in self.deltas)

    @property
    def changed(self) -> tuple[CellDelta, ...]:
        return tuple(d for d in self.deltas if d.changed)

    @property
    def propagated_cells(self) -> int:
        """Dependents (excluding the edited cell) whose value actually changed."""
        return sum(1 for d in self.deltas if d.changed and d.address != self.edited)


@runtime_checkable
class CalcEngine(Protocol):
    """The surface a grid front end drives."""

    def get_cell(self, address: Address | str) -> Cell:
        """Read-only snapshot; blank defaults for unset addresses."""
        ...

    def set_cell(self, address: Address | str, content: str) -> None:
        """Store *content* and recompute every dependent before returning."""
        ...
