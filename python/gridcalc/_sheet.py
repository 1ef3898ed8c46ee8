"""Sheet: owns the cell map and dependency index, and recalculates on edit."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator

from gridcalc._address import Address, coerce_address
from gridcalc._cell import BLANK, Cell
from gridcalc.calc._evaluator import evaluate
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._parser import is_formula, parse_references
from gridcalc.calc._protocol import CellDelta, RecalcResult

logger = logging.getLogger(__name__)


class Sheet:
    """A sparse grid of cells with formula recalculation.

    Usage::

        sheet = Sheet()
        sheet["B1"] = "5"
        sheet["A1"] = "=B1+1"
        sheet["A1"].display_value   # "6"
        sheet["B1"] = "10"
        sheet["A1"].display_value   # "11"

    Every edit runs as one batch: the edited cell is recomputed, then each
    formula cell that depends on it, transitively, each at most once.
    """

    __slots__ = ("_cells", "_graph", "_trim_trailing_operator")

    def __init__(self, *, trim_trailing_operator: bool = True) -> None:
        self._cells: dict[Address, Cell] = {}
        self._graph = DependencyGraph()
        self._trim_trailing_operator = trim_trailing_operator

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def get_cell(self, address: Address | str) -> Cell:
        """Snapshot of a cell; unset addresses read as blank."""
        return self._cells.get(coerce_address(address), BLANK)

    def set_cell(self, address: Address | str, content: str) -> None:
        """Store *content* and recalculate every dependent before returning."""
        self.update(address, content)

    def clear_cell(self, address: Address | str) -> None:
        self.update(address, "")

    def __getitem__(self, key: Address | str) -> Cell:
        """``sheet['A1']`` -> Cell."""
        return self.get_cell(key)

    def __setitem__(self, key: Address | str, content: str) -> None:
        """``sheet['A1'] = '=B1*2'``."""
        self.set_cell(key, content)

    def __delitem__(self, key: Address | str) -> None:
        self.clear_cell(key)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Address]:
        return iter(sorted(self._cells))

    def values(self) -> dict[str, str]:
        """Label -> display value for every non-blank cell."""
        return {addr.label: self._cells[addr].display_value for addr in self}

    def dependents(self, address: Address | str) -> frozenset[Address]:
        return self._graph.get_dependents(coerce_address(address))

    def dependencies(self, address: Address | str) -> frozenset[Address]:
        return self.get_cell(address).depends_on

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    # ------------------------------------------------------------------
    # Update batch
    # ------------------------------------------------------------------

    def update(self, address: Address | str, content: str) -> RecalcResult:
        """Apply one edit and recompute everything it affects.

        Cells are drained from a FIFO worklist; a cell already processed in
        this batch is skipped, which also bounds the batch when formulas
        form a cycle.
        """
        if not isinstance(content, str):
            raise TypeError(f"Cell content must be a string, got {type(content).__name__}")
        edited = coerce_address(address)
        logger.debug("Update batch for %s: %r", edited.label, content)

        processed: set[Address] = set()
        pending: deque[Address] = deque([edited])
        deltas: list[CellDelta] = []

        while pending:
            cell_ref = pending.popleft()
            if cell_ref in processed:
                continue
            processed.add(cell_ref)

            old = self._cells.get(cell_ref, BLANK)
            # Dependents keep their own formula; only the edited cell changes content
            new_content = content if cell_ref == edited else old.content
            new = self._recompute(cell_ref, old, new_content)
            deltas.append(CellDelta(
                address=cell_ref,
                old_value=old.display_value,
                new_value=new.display_value,
                content=new.content,
            ))

            for dep in sorted(self._graph.get_dependents(cell_ref)):
                if dep in processed:
                    continue
                if self._cells.get(dep, BLANK).is_formula:
                    pending.append(dep)

        logger.debug("Update batch for %s recomputed %d cell(s)", edited.label, len(deltas))
        return RecalcResult(edited=edited, deltas=tuple(deltas))

    def _recompute(self, address: Address, old: Cell, content: str) -> Cell:
        """Re-derive one cell from *content* and swap its outgoing edges.

        The new cell is fully computed before the graph is touched.
        """
        if is_formula(content):
            depends_on = frozenset(parse_references(content))
            display = evaluate(
                content,
                self._raw_content,
                {address},
                trim_trailing_operator=self._trim_trailing_operator,
            )
            cell = Cell(content=content, display_value=display, depends_on=depends_on)
        else:
            cell = Cell(content=content, display_value=content)

        self._graph.remove_outgoing_edges(address, old.depends_on)
        self._graph.add_outgoing_edges(address, cell.depends_on)

        if cell.is_blank:
            self._cells.pop(address, None)
        else:
            self._cells[address] = cell
        return cell

    def _raw_content(self, address: Address) -> str:
        return self._cells.get(address, BLANK).content

    def __repr__(self) -> str:
        return f"<Sheet cells={len(self)} dependency_nodes={len(self._graph)}>"
