"""Cell addresses and A1-style label conversion."""

from __future__ import annotations

import re
from dataclasses import dataclass

_LABEL_RE = re.compile(r"([A-Z]+)([0-9]+)")


def column_label(index: int) -> str:
    """Convert a 0-based column index to letters (0 -> "A", 26 -> "AA")."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    label = ""
    col = index
    while col >= 0:
        col, rem = divmod(col, 26)
        label = chr(ord("A") + rem) + label
        col -= 1
    return label


def column_index(letters: str) -> int:
    """Convert column letters to a 0-based index ("A" -> 0, "AA" -> 26)."""
    if not letters or not letters.isascii() or not letters.isalpha() or not letters.isupper():
        raise ValueError(f"Invalid column letters: {letters!r}")
    result = 0
    for ch in letters:
        result = result * 26 + (ord(ch) - ord("A") + 1)
    return result - 1


@dataclass(frozen=True, order=True)
class Address:
    """A zero-based (column, row) coordinate.

    Ordering sorts by row first so iteration reads left-to-right,
    top-to-bottom.
    """

    row: int
    column: int

    def __post_init__(self) -> None:
        if self.row < 0 or self.column < 0:
            raise ValueError(
                f"Address components must be non-negative, got column={self.column} row={self.row}"
            )

    @property
    def label(self) -> str:
        return address_label(self.column, self.row)

    @classmethod
    def parse(cls, label: str) -> Address:
        return parse_address(label)

    def __str__(self) -> str:
        return self.label


def address_label(column: int, row: int) -> str:
    """``address_label(0, 0)`` -> ``"A1"``."""
    if row < 0:
        raise ValueError(f"Row index must be non-negative, got {row}")
    return f"{column_label(column)}{row + 1}"


def parse_address(label: str) -> Address:
    """Parse an A1-style label into an :class:`Address`.

    Raises ValueError for anything that is not upper-case letters followed
    by a 1-based row number.
    """
    m = _LABEL_RE.fullmatch(label)
    if not m:
        raise ValueError(f"Invalid cell label: {label!r}")
    row = int(m.group(2))
    if row < 1:
        raise ValueError(f"Row number must be >= 1 in {label!r}")
    return Address(row=row - 1, column=column_index(m.group(1)))


def coerce_address(ref: Address | str) -> Address:
    """Accept either an Address or its label."""
    if isinstance(ref, Address):
        return ref
    if isinstance(ref, str):
        return parse_address(ref.strip())
    raise TypeError(f"Expected Address or label string, got {type(ref).__name__}")
