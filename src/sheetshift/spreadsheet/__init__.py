"""
Spreadsheet primitives.

This module provides column label conversion, A1 ranges, and the
kind-tagged cell content used to clone cells between positions.
"""

from sheetshift.spreadsheet.reference import (
    Range,
    column_index,
    column_label,
)
from sheetshift.spreadsheet.cells import (
    BLANK,
    CellContent,
    CellKind,
    clone_into,
    read_content,
    write_content,
)

__all__ = [
    "Range",
    "column_index",
    "column_label",
    "BLANK",
    "CellContent",
    "CellKind",
    "clone_into",
    "read_content",
    "write_content",
]
