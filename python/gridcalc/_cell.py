"""Immutable cell snapshot handed out by :class:`gridcalc.Sheet`."""

from __future__ import annotations

from dataclasses import dataclass, field

from gridcalc._address import Address


@dataclass(frozen=True)
class Cell:
    """Raw content, displayed value and direct references of one cell.

    ``display_value`` equals ``content`` for plain cells and holds the
    evaluation result (or an error token) for formula cells.
    """

    content: str = ""
    display_value: str = ""
    depends_on: frozenset[Address] = field(default_factory=frozenset)

    @property
    def is_formula(self) -> bool:
        return self.content.startswith("=")

    @property
    def is_blank(self) -> bool:
        return self.content == ""


BLANK = Cell()
