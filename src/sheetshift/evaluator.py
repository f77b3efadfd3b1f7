"""
Workbook-scoped formula recalculation backed by formualizer.

openpyxl stores formula text but never evaluates it. ``FormulaEvaluator``
replays an openpyxl workbook's literal values and formulas into an
in-memory formualizer Workbook, evaluates every formula cell, and keeps the
results until they are cleared. Clearing and evaluating bracket a column
insertion: results cached before the shift are dropped up front and
recomputed once all rows and widths are settled.
"""

from __future__ import annotations

import datetime
import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import formualizer as fz
import pandas as pd
from openpyxl.utils.datetime import to_excel
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.formula import ArrayFormula

from sheetshift.exceptions import MissingSheetError, MissingWorkbookError
from sheetshift.spreadsheet.cells import CellKind, read_content
from sheetshift.spreadsheet.reference import column_label

logger = logging.getLogger(__name__)

CellKey = tuple[str, int, int]

_ENGINE_ERRORS = (fz.ExcelEvaluationError, fz.ParserError, fz.TokenizerError)


class FormulaEvaluator:
    """Recalculates the formula cells of one openpyxl workbook.

    Usage::

        evaluator = FormulaEvaluator(workbook)
        evaluator.evaluate_all()
        evaluator.value("Sheet", 0, 3)

    All coordinates are 0-indexed.
    """

    def __init__(self, workbook: Workbook) -> None:
        if workbook is None:
            raise MissingWorkbookError("Error: Workbook can not be None")
        self.workbook = workbook
        self._results: dict[CellKey, Any] = {}
        self._engine: fz.Workbook | None = None

    @property
    def results(self) -> dict[CellKey, Any]:
        """Cached formula results from the last ``evaluate_all`` call."""
        return dict(self._results)

    def clear_cached_results(self) -> None:
        """Drop every cached result and the replayed formualizer workbook."""
        self._results.clear()
        self._engine = None

    @contextmanager
    def recalculation(self) -> Iterator["FormulaEvaluator"]:
        """Bracket a structural edit of the workbook.

        Cached results are dropped on entry and every formula cell is
        evaluated exactly once when the block completes. If the block
        raises, nothing is evaluated and the error propagates.
        """
        self.clear_cached_results()
        yield self
        self.evaluate_all()

    def evaluate_all(self) -> dict[CellKey, Any]:
        """Replay the workbook and evaluate every formula cell.

        Returns:
            Mapping of ``(sheet_name, row, col)`` to the evaluated value.
            Error results, and formulas formualizer cannot evaluate at all,
            are normalised to ``""``.
        """
        self.clear_cached_results()
        engine = self._replay()
        for ws in self.workbook.worksheets:
            for (row, col), cell in sorted(ws._cells.items()):
                if read_content(cell).kind is not CellKind.FORMULA:
                    continue
                key = (ws.title, row - 1, col - 1)
                self._results[key] = _evaluate(engine, ws.title, row, col)

        logger.debug("Evaluated %d formula cells", len(self._results))
        return self.results

    def value(self, sheet_name: str, row: int, col: int) -> Any:
        """Return the cached result for a formula cell.

        Raises:
            KeyError: If the cell was not a formula cell at the last evaluation
        """
        return self._results[(sheet_name, row, col)]

    def read_sheet(self, sheet_name: str) -> list[list[Any]]:
        """Evaluate and read back all cells for *sheet_name*.

        Returns a 2D list (rows x cols) with trailing all-empty rows
        trimmed. Empty or ``None`` cells are normalised to ``""``.
        """
        if sheet_name not in self.workbook.sheetnames:
            raise MissingSheetError(f"No sheet named {sheet_name!r}")
        engine = self._engine if self._engine is not None else self._replay()
        ws = self.workbook[sheet_name]
        matrix: list[list[Any]] = []
        for r in range(1, ws.max_row + 1):
            matrix.append([
                _evaluate(engine, sheet_name, r, c)
                for c in range(1, ws.max_column + 1)
            ])
        return _trim_trailing_empty_rows(matrix)

    def to_frame(self, sheet_name: str) -> pd.DataFrame:
        """Evaluate *sheet_name* into a DataFrame indexed by 0-based row."""
        return pd.DataFrame(self.read_sheet(sheet_name))

    def _replay(self) -> fz.Workbook:
        engine = fz.Workbook()
        for ws in self.workbook.worksheets:
            engine.add_sheet(ws.title)
        for ws in self.workbook.worksheets:
            sheet = engine.sheet(ws.title)
            for (row, col), cell in ws._cells.items():
                content = read_content(cell)
                if content.kind is CellKind.FORMULA:
                    text = _formula_text(content.value)
                    try:
                        engine.set_formula(ws.title, row, col, text)
                    except _ENGINE_ERRORS as exc:
                        logger.warning(
                            "Skipping formula %s!%s %r: %s", ws.title, cell.coordinate, text, exc
                        )
                elif not content.is_empty:
                    sheet.set_value(row, col, _to_literal(content.kind, content.value))
        self._engine = engine
        return engine


def _evaluate(engine: fz.Workbook, sheet_name: str, row: int, col: int) -> Any:
    """Evaluate one 1-based cell, reporting failures as ``""``."""
    try:
        return _normalize(engine.evaluate_cell(sheet_name, row, col))
    except _ENGINE_ERRORS as exc:
        logger.warning(
            "Could not evaluate %s!%s%d: %s", sheet_name, column_label(col - 1), row, exc
        )
        return ""


def _formula_text(formula: Any) -> str:
    """Return formula source text with a leading ``=``."""
    if isinstance(formula, ArrayFormula):
        formula = formula.text
    formula = str(formula)
    return formula if formula.startswith("=") else f"={formula}"


def _to_literal(kind: CellKind, value: Any) -> fz.LiteralValue:
    """Convert a cell payload to a formualizer LiteralValue.

    Error codes become formualizer error values, so ``ISERROR`` and friends
    see them as errors rather than as strings.
    """
    if kind is CellKind.BOOLEAN:
        return fz.LiteralValue.boolean(bool(value))
    if kind is CellKind.NUMERIC:
        return fz.LiteralValue.number(float(value))
    if kind is CellKind.DATE:
        if isinstance(value, datetime.timedelta):
            return fz.LiteralValue.number(value.total_seconds() / 86400)
        return fz.LiteralValue.number(float(to_excel(value)))
    if kind is CellKind.ERROR:
        try:
            return fz.LiteralValue.error(str(value), None)
        except ValueError:
            # Codes formualizer does not know stay visible as their text.
            logger.debug("Replaying unknown error code %r as text", value)
    return fz.LiteralValue.text(str(value))


def _normalize(value: Any) -> Any:
    """Normalise a value returned by formualizer.

    * ``None`` → ``""``
    * Error dicts → ``""``
    * NaN → ``""``
    """
    if value is None:
        return ""
    if isinstance(value, dict):
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return value


def _trim_trailing_empty_rows(matrix: list[list[Any]]) -> list[list[Any]]:
    while matrix and all(cell == "" for cell in matrix[-1]):
        matrix.pop()
    return matrix
