"""Formula evaluation errors.

Every error is local to the cell being evaluated. The evaluator raises
these internally and turns them into display tokens at its boundary, so
callers only ever see strings such as ``#CIRCULAR`` or
``#ERROR: Invalid expression syntax``.
"""

from __future__ import annotations

from gridcalc._address import Address

CIRCULAR_TOKEN = "#CIRCULAR"
ERROR_PREFIX = "#ERROR: "


def is_error_token(value: str) -> bool:
    return value == CIRCULAR_TOKEN or value.startswith(ERROR_PREFIX)


class FormulaError(Exception):
    """Base class for cell-local evaluation failures."""

    @property
    def token(self) -> str:
        return f"{ERROR_PREFIX}{self}"


class CircularReferenceError(FormulaError):
    """Resolution re-entered a cell that is already being resolved."""

    def __init__(self, address: Address) -> None:
        super().__init__(f"Circular reference at {address.label}")
        self.address = address

    @property
    def token(self) -> str:
        return CIRCULAR_TOKEN


class InvalidOperandError(FormulaError):
    """A referenced plain cell holds something other than a number."""

    def __init__(self, address: Address, value: str) -> None:
        super().__init__(f"Cell {address.label} contains non-numeric data: {value}")
        self.address = address
        self.value = value


class PropagatedError(FormulaError):
    """A referenced formula cell failed, so the referencing cell fails too."""

    def __init__(self, address: Address, inner: str) -> None:
        super().__init__(f"Error in referenced cell {address.label}: {inner}")
        self.address = address
        self.inner = inner


class InvalidSyntaxError(FormulaError):
    """The expression cannot be reduced to a number.

    *expression* keeps the offending text for logging; the display token
    carries only *message*.
    """

    UNRESOLVED = "Invalid cell reference or syntax"
    MALFORMED = "Invalid expression syntax"

    def __init__(self, message: str, expression: str) -> None:
        super().__init__(message)
        self.expression = expression
