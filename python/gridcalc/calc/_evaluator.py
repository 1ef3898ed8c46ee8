"""Formula evaluator: stack-based reference resolution plus a recursive
descent arithmetic reducer.

A formula such as ``=(A1+B2)*2`` is evaluated in three steps:

1. every reference is replaced by its operand text, evaluating referenced
   formulas depth-first on an explicit stack that carries the path of cells
   currently being resolved (re-entering that path is a circular reference),
2. anything that still looks like a name is rejected,
3. the remaining ``+ - * /`` expression is reduced to a float and rendered
   in canonical form.

Failures never escape :func:`evaluate`; they come back as display tokens.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable
from decimal import Decimal

from gridcalc._address import Address
from gridcalc.calc._errors import (
    CircularReferenceError,
    FormulaError,
    InvalidOperandError,
    InvalidSyntaxError,
    PropagatedError,
    is_error_token,
)
from gridcalc.calc._parser import (
    CELL_REF_RE,
    formula_body,
    is_formula,
    is_numeric,
    parse_reference,
    parse_references,
)

logger = logging.getLogger(__name__)

Resolver = Callable[[Address], str]

# Letters, ``$`` or ``_`` left after substitution mean a name we could not resolve.
_UNRESOLVED_RE = re.compile(r"[A-Za-z$_]")
_NUMBER_LITERAL_RE = re.compile(r"[0-9]+\.?[0-9]*|\.[0-9]+")
_OPERATORS = ("+", "-", "*", "/")

# ---------------------------------------------------------------------------
# Arithmetic helpers
# ---------------------------------------------------------------------------


def _find_matching_paren(expr: str, start: int) -> int:
    """Index of the ``')'`` matching the ``'('`` at *expr[start]*, or -1."""
    depth = 1
    for i in range(start + 1, len(expr)):
        ch = expr[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _find_top_level_split(expr: str) -> tuple[str, str, str] | None:
    """Find the rightmost lowest-precedence binary operator at paren depth 0.

    Additive operators are tried before multiplicative ones. Scanning
    right-to-left gives left-to-right associativity. Returns
    ``(left, op, right)`` or ``None``.
    """
    for ops in (("+", "-"), ("*", "/")):
        depth = 0
        i = len(expr) - 1
        while i > 0:
            ch = expr[i]
            if ch == ")":
                depth += 1
            elif ch == "(":
                depth -= 1
            elif depth == 0 and ch in ops:
                # Binary only if preceded by an operand, not another operator
                j = i - 1
                while j >= 0 and expr[j] == " ":
                    j -= 1
                if j >= 0 and expr[j] not in ("(",) + _OPERATORS:
                    left = expr[:i].strip()
                    right = expr[i + 1 :].strip()
                    if left and right:
                        return (left, ch, right)
            i -= 1
    return None


def _divide(left: float, right: float) -> float:
    """IEEE-754 division: ``x/0`` is signed infinity, ``0/0`` is NaN."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _binary_op(left: float, op: str, right: float) -> float:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    return _divide(left, right)


def _reduce(expr: str, source: str) -> float:
    """Recursively reduce *expr*; *source* is the whole expression for errors.

    Dispatch order (first match wins):

    1. Binary split at top level (additive, then multiplicative)
    2. Parenthesized sub-expression ``(...)``
    3. Unary minus / plus
    4. Decimal literal
    """
    expr = expr.strip()
    if not expr:
        raise InvalidSyntaxError(InvalidSyntaxError.MALFORMED, source)

    split = _find_top_level_split(expr)
    if split:
        left_str, op, right_str = split
        return _binary_op(_reduce(left_str, source), op, _reduce(right_str, source))

    if expr.startswith("("):
        close = _find_matching_paren(expr, 0)
        if close == len(expr) - 1:
            return _reduce(expr[1:close], source)

    if expr.startswith("-"):
        return -_reduce(expr[1:], source)
    if expr.startswith("+"):
        return _reduce(expr[1:], source)

    if _NUMBER_LITERAL_RE.fullmatch(expr):
        return float(expr)

    raise InvalidSyntaxError(InvalidSyntaxError.MALFORMED, source)


def evaluate_arithmetic(expression: str) -> float:
    """Reduce a pure arithmetic expression (numbers, ``+ - * /``, parens).

    Raises InvalidSyntaxError if the expression is malformed.
    """
    return _reduce(expression, expression)


def format_number(value: float) -> str:
    """Canonical display form of a numeric result.

    Finite values with magnitude in ``[1e-7, 1e21)`` render positionally
    (``0.00001``, never ``1e-05``); others use a compact exponent
    (``1e-8``, ``1.5e+22``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if 1e-7 <= abs(value) < 1e21:
        return format(Decimal(text), "f")
    mantissa, _, exponent = text.partition("e")
    return f"{mantissa}e{int(exponent):+d}"


def strip_trailing_operator(expression: str) -> str:
    """Drop one trailing arithmetic operator, tolerating ``=A1+`` mid-edit."""
    expression = expression.rstrip()
    if expression and expression[-1] in _OPERATORS:
        return expression[:-1]
    return expression


# ---------------------------------------------------------------------------
# Reference resolution
# ---------------------------------------------------------------------------


class _Frame:
    """One formula on the resolution stack.

    *path* holds the cells currently being resolved above and including
    this one; *operands* collects the text substituted for each reference.
    """

    __slots__ = ("address", "formula", "path", "refs", "index", "operands")

    def __init__(self, address: Address | None, formula: str, path: frozenset[Address]) -> None:
        self.address = address
        self.formula = formula
        self.path = path
        self.refs = parse_references(formula)
        self.index = 0
        self.operands: dict[Address, str] = {}


def _plain_operand(address: Address, content: str) -> str:
    """Operand text for a referenced non-formula cell."""
    if content == "":
        return "0"
    if not is_numeric(content):
        raise InvalidOperandError(address, content)
    return content


def _reduce_formula(frame: _Frame, trim: bool) -> str:
    """Substitute resolved operands and reduce the arithmetic."""

    def substitute(m: re.Match[str]) -> str:
        address = parse_reference(m.group(0))
        if address is None:
            return m.group(0)
        return frame.operands[address]

    expression = CELL_REF_RE.sub(substitute, formula_body(frame.formula))

    if _UNRESOLVED_RE.search(expression):
        raise InvalidSyntaxError(InvalidSyntaxError.UNRESOLVED, expression)

    if trim:
        expression = strip_trailing_operator(expression)

    return format_number(evaluate_arithmetic(expression))


def _error_token(formula: str, error: FormulaError) -> str:
    if isinstance(error, InvalidSyntaxError):
        logger.debug("Invalid expression %r from formula %r: %s", error.expression, formula, error)
    else:
        logger.debug("Cannot evaluate formula %r: %s", formula, error)
    return error.token


def evaluate(
    formula: str,
    resolve: Resolver,
    visited: Iterable[Address] = (),
    *,
    trim_trailing_operator: bool = True,
) -> str:
    """Evaluate *formula* to a display string.

    *resolve* returns a referenced cell's raw content (``""`` for blank
    cells). *visited* holds the cells currently being resolved; the caller
    normally seeds it with the formula's own address. Non-formula input is
    returned unchanged.

    Referenced formulas are resolved depth-first on an explicit stack, so
    chain length is limited only by the number of cells. A referenced cell
    that resolved successfully is reused for the rest of the call; its
    value cannot depend on the path it was reached through.
    """
    if not is_formula(formula):
        return formula

    resolved: dict[Address, str] = {}
    stack: list[_Frame] = [_Frame(None, formula, frozenset(visited))]

    while True:
        frame = stack[-1]
        try:
            if frame.index < len(frame.refs):
                address = frame.refs[frame.index]
                if address in frame.path:
                    raise CircularReferenceError(address)
                if address not in resolved:
                    content = resolve(address)
                    if is_formula(content):
                        stack.append(_Frame(address, content, frame.path | {address}))
                        continue
                    resolved[address] = _plain_operand(address, content)
                frame.operands[address] = resolved[address]
                frame.index += 1
                continue
            result = _reduce_formula(frame, trim_trailing_operator)
        except FormulaError as e:
            result = _error_token(frame.formula, e)

        # Hand the finished value up; a failed reference fails each referrer in turn
        stack.pop()
        while stack:
            parent = stack[-1]
            if not is_error_token(result):
                resolved[frame.address] = result
                parent.operands[frame.address] = result
                parent.index += 1
                break
            result = _error_token(parent.formula, PropagatedError(frame.address, result))
            frame = stack.pop()
        else:
            return result
