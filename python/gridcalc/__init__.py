"""gridcalc - spreadsheet recalculation engine.

Usage::

    from gridcalc import Sheet

    sheet = Sheet()
    sheet["A1"] = "1"
    sheet["B1"] = "=A1+1"
    sheet["C1"] = "=B1*2"
    sheet["A1"] = "10"
    print(sheet["C1"].display_value)   # "22"
"""

from gridcalc._address import Address, address_label, column_index, column_label, parse_address
from gridcalc._cell import BLANK, Cell
from gridcalc._sheet import Sheet

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Address",
    "BLANK",
    "Cell",
    "Sheet",
    "address_label",
    "column_index",
    "column_label",
    "parse_address",
]
