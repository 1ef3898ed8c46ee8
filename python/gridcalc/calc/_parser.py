"""Formula parser: regex-based reference extraction and operand classification."""

from __future__ import annotations

import re

from gridcalc._address import Address, parse_address

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Cell ref: upper-case column letters followed by row digits (A1, AB12)
CELL_REF_RE = re.compile(r"[A-Z]+[0-9]+")

# Signed decimal literal, no exponent: 12, -3.5, .5, 4.
_NUMERIC_RE = re.compile(r"\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)\s*")


def is_formula(content: str) -> bool:
    return content.startswith("=")


def is_numeric(content: str) -> bool:
    """True when *content* is a plain decimal number usable as an operand."""
    return _NUMERIC_RE.fullmatch(content) is not None


def formula_body(formula: str) -> str:
    """Strip the leading ``=`` and surrounding whitespace."""
    body = formula[1:] if formula.startswith("=") else formula
    return body.strip()


# ---------------------------------------------------------------------------
# Reference extraction
# ---------------------------------------------------------------------------


def parse_reference(token: str) -> Address | None:
    """Resolve a matched reference token, or None if it is not a valid address.

    Tokens with row 0 (``A0``) match the pattern but address nothing.
    """
    try:
        return parse_address(token)
    except ValueError:
        return None


def parse_references(formula: str) -> list[Address]:
    """Extract all cell references from a formula.

    Returns addresses in order of first appearance, duplicates collapsed.
    Non-formulas have no references.
    """
    if not is_formula(formula):
        return []
    refs: list[Address] = []
    seen: set[Address] = set()
    for m in CELL_REF_RE.finditer(formula_body(formula)):
        addr = parse_reference(m.group(0))
        if addr is not None and addr not in seen:
            refs.append(addr)
            seen.add(addr)
    return refs
