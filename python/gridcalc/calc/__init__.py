"""gridcalc.calc - Formula evaluation engine for gridcalc sheets."""

from gridcalc.calc._errors import (
    CIRCULAR_TOKEN,
    CircularReferenceError,
    FormulaError,
    InvalidOperandError,
    InvalidSyntaxError,
    PropagatedError,
    is_error_token,
)
from gridcalc.calc._evaluator import evaluate, evaluate_arithmetic, format_number
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._parser import is_formula, is_numeric, parse_references
from gridcalc.calc._protocol import CalcEngine, CellDelta, RecalcResult

__all__ = [
    "CIRCULAR_TOKEN",
    "CalcEngine",
    "CellDelta",
    "CircularReferenceError",
    "DependencyGraph",
    "FormulaError",
    "InvalidOperandError",
    "InvalidSyntaxError",
    "PropagatedError",
    "RecalcResult",
    "evaluate",
    "evaluate_arithmetic",
    "format_number",
    "is_error_token",
    "is_formula",
    "is_numeric",
    "parse_references",
]
