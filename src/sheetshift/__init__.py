"""
sheetshift - Column insertion and cell cloning helpers for openpyxl workbooks.

This package works on an already-open openpyxl workbook: it inserts columns
by shifting cells right, clones a cell's kind-tagged value, style and comment
into another cell, converts zero-based column indices to spreadsheet labels,
recalculates formulas through formualizer, and saves the result to disk.

Usage:
    >>> import sheetshift
    >>> wb = sheetshift.load_workbook("report.xlsx")
    >>> evaluator = sheetshift.insert_column(wb, sheet=0, column=1)
    >>> sheetshift.save_workbook(wb, "report.xlsx")

Key components:
- column_label / column_index: bijective base-26 column labels (0 = "A")
- clone_into: copy one cell's content, style and comment onto another
- insert_column: open a blank column and shift cells and widths right
- FormulaEvaluator: workbook-scoped formula recalculation
- save_workbook / load_workbook: persistence with errors surfaced
"""

import logging

from .columns import discover_width, insert_column, select_sheet
from .evaluator import FormulaEvaluator
from .exceptions import *
from .persistence import load_workbook, save_workbook
from .spreadsheet import (
    CellContent,
    CellKind,
    Range,
    clone_into,
    column_index,
    column_label,
)

# Version
__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CellContent",
    "CellKind",
    "FormulaEvaluator",
    "Range",
    "clone_into",
    "column_index",
    "column_label",
    "discover_width",
    "insert_column",
    "load_workbook",
    "save_workbook",
    "select_sheet",
]
