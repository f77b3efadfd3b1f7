"""
Column insertion for openpyxl worksheets.

``insert_column`` opens a blank column at a zero-based index by shifting
every stored cell at or beyond it one position to the right, then shifts
the column widths the same way and recalculates the workbook's formulas.

Formula text is carried verbatim: a formula that read ``=B1`` before the
shift still reads ``=B1`` afterwards, even though the cell it pointed at has
moved to ``C1``. Only the cached results are recomputed.
"""

from __future__ import annotations

import logging
from copy import copy
from typing import Optional, Union

from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from sheetshift.evaluator import FormulaEvaluator
from sheetshift.exceptions import MissingRowError, MissingSheetError, MissingWorkbookError
from sheetshift.spreadsheet.cells import clone_into
from sheetshift.spreadsheet.reference import Range, column_label

logger = logging.getLogger(__name__)

SheetSelector = Union[int, str]


def select_sheet(workbook: Workbook, sheet: SheetSelector) -> Worksheet:
    """Look up a worksheet by zero-based position or by name.

    Raises:
        MissingWorkbookError: If workbook is None
        MissingSheetError: If no sheet matches the selector
    """
    if workbook is None:
        raise MissingWorkbookError("Error: Workbook can not be None")

    if isinstance(sheet, str):
        if sheet not in workbook.sheetnames:
            raise MissingSheetError(f"No sheet named {sheet!r}")
        return workbook[sheet]

    if isinstance(sheet, bool) or not isinstance(sheet, int):
        raise MissingSheetError(f"Sheet selector must be an index or a name, got {sheet!r}")
    if not 0 <= sheet < len(workbook.worksheets):
        raise MissingSheetError(
            f"Sheet index {sheet} out of range for {len(workbook.worksheets)} sheets"
        )
    return workbook.worksheets[sheet]


def present_rows(worksheet: Worksheet) -> list[int]:
    """Return the zero-based indices of rows holding at least one cell."""
    return sorted({row - 1 for (row, _col) in worksheet._cells})


def discover_width(worksheet: Worksheet, probe_row: Optional[int] = None) -> int:
    """Return the number of columns in use: highest occupied index plus one.

    By default every stored cell is scanned. When ``probe_row`` is given only
    that zero-based row is measured.

    Raises:
        MissingRowError: If ``probe_row`` holds no cells
    """
    if probe_row is None:
        columns = [col for (_row, col) in worksheet._cells]
    else:
        columns = [col for (row, col) in worksheet._cells if row == probe_row + 1]
        if not columns:
            raise MissingRowError(
                f"Row {probe_row} of sheet {worksheet.title!r} holds no cells"
            )
    # openpyxl columns are 1-based, so the highest one is already the width.
    return max(columns, default=0)


def shift_row(worksheet: Worksheet, row: int, width: int, column: int) -> None:
    """Shift one row's cells from ``column`` onwards one position right.

    Columns are visited right to left so each cell is read before it is
    overwritten. The vacated position receives a fresh blank cell.
    """
    cells = worksheet._cells
    r = row + 1
    for target in range(width, column, -1):
        cells.pop((r, target + 1), None)
        source = cells.get((r, target))
        if source is not None:
            clone_into(worksheet.cell(row=r, column=target + 1), source)

    cells.pop((r, column + 1), None)
    worksheet.cell(row=r, column=column + 1)


def split_column_groups(worksheet: Worksheet) -> None:
    """Give every column covered by a ``min..max`` dimension its own entry.

    openpyxl loads ``<col min="2" max="5">`` as a single dimension keyed by
    its first letter, so the columns after the first would otherwise have
    no width of their own to shift.
    """
    dimensions = worksheet.column_dimensions
    for dimension in list(dimensions.values()):
        if dimension.min is None or dimension.max is None or dimension.max <= dimension.min:
            continue
        for index in range(dimension.min + 1, dimension.max + 1):
            single = copy(dimension)
            single.index = column_label(index - 1)
            single.min = single.max = index
            dimensions[single.index] = single
        dimension.max = dimension.min


def shift_column_widths(worksheet: Worksheet, width: int, column: int) -> None:
    """Move recorded column widths one position right from ``column`` on.

    Grouped dimensions are split first. A column with no recorded dimension
    resets its right-hand neighbour to the sheet default. The width at
    ``column`` itself is left in place.
    """
    split_column_groups(worksheet)
    dimensions = worksheet.column_dimensions
    for target in range(width, column, -1):
        target_label, source_label = column_label(target), column_label(target - 1)
        if source_label in dimensions:
            dimensions[target_label].width = dimensions[source_label].width
        elif target_label in dimensions:
            del dimensions[target_label]


def insert_column(
    workbook: Workbook,
    sheet: SheetSelector = 0,
    column: int = 0,
    *,
    probe_row: Optional[int] = None,
    evaluator: Optional[FormulaEvaluator] = None,
) -> FormulaEvaluator:
    """Insert a blank column at a zero-based index.

    Every row holding cells is processed independently: cells at ``column``
    and beyond move one position right (value, kind, style and comment),
    and ``column`` receives a blank cell. Column widths shift the same way.
    Formula text is not rewritten; formulas are recalculated once at the
    end against their unchanged text.

    There is no rollback: an error part-way leaves the sheet partly shifted.

    Args:
        workbook: The openpyxl workbook to modify in place
        sheet: Zero-based sheet position or sheet name
        column: Zero-based index of the new column
        probe_row: Measure the sheet width from this zero-based row only,
            instead of scanning every row
        evaluator: Evaluator to recalculate with; a new one is created
            when omitted

    Returns:
        The evaluator holding the recalculated formula results.

    Raises:
        MissingWorkbookError: If workbook is None
        InvalidColumnIndexError: If column is negative or not an integer
        MissingSheetError: If the sheet selector matches no sheet
        MissingRowError: If ``probe_row`` holds no cells
    """
    if workbook is None:
        raise MissingWorkbookError("Error: Workbook can not be None")
    label = column_label(column)
    worksheet = select_sheet(workbook, sheet)
    width = discover_width(worksheet, probe_row)
    rows = present_rows(worksheet)
    logger.debug("Sheet %r: %d rows present, width %d", worksheet.title, len(rows), width)

    if evaluator is None:
        evaluator = FormulaEvaluator(workbook)

    with evaluator.recalculation():
        for row in rows:
            shift_row(worksheet, row, width, column)
        shift_column_widths(worksheet, width, column)

    if rows and width > column:
        moved = Range(rows[0], column, rows[-1], width - 1)
        logger.info(
            "Inserted column %s in sheet %r, moved %s to %s",
            label, worksheet.title, moved.to_a1(), moved.offset(col_offset=1).to_a1(),
        )
    else:
        logger.info("Inserted column %s in sheet %r", label, worksheet.title)
    return evaluator
