"""
Kind-tagged cell content and cell cloning.

openpyxl stores a cell's payload in ``_value`` and its type tag in
``data_type``. This module reads that pair into a flat ``CellContent``
variant and writes it back without letting openpyxl re-infer the type, so
a string that happens to start with "=" stays a string and a formula is
carried as formula text.
"""

from copy import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any

from openpyxl.cell.cell import Cell, MergedCell


class CellKind(Enum):
    """Kind of payload a cell currently holds."""
    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    STRING = "string"
    ERROR = "error"
    FORMULA = "formula"
    DATE = "date"
    BLANK = "blank"
    NONE = "none"


_KIND_BY_DATA_TYPE = {
    "b": CellKind.BOOLEAN,
    "n": CellKind.NUMERIC,
    "s": CellKind.STRING,
    "inlineStr": CellKind.STRING,
    "e": CellKind.ERROR,
    "f": CellKind.FORMULA,
    "d": CellKind.DATE,
}

_DATA_TYPE_BY_KIND = {
    CellKind.BOOLEAN: "b",
    CellKind.NUMERIC: "n",
    CellKind.STRING: "s",
    CellKind.ERROR: "e",
    CellKind.FORMULA: "f",
    CellKind.DATE: "d",
    CellKind.BLANK: "n",
    CellKind.NONE: "n",
}


@dataclass(frozen=True)
class CellContent:
    """A cell's payload together with its kind tag.

    Attributes:
        kind: The payload kind
        value: bool, number, text, error code, formula text (or an openpyxl
            array formula), temporal value, or None for BLANK and NONE
    """
    kind: CellKind
    value: Any = None

    @property
    def is_empty(self) -> bool:
        return self.kind in (CellKind.BLANK, CellKind.NONE)


BLANK = CellContent(CellKind.BLANK)


def read_content(cell: Cell) -> CellContent:
    """Read the kind-tagged content of an openpyxl cell.

    Merged-cell slots report ``NONE``; any cell holding no value reports
    ``BLANK`` whatever its stale type tag says.
    """
    if isinstance(cell, MergedCell):
        return CellContent(CellKind.NONE)
    value = cell._value
    if value is None:
        return BLANK
    kind = _KIND_BY_DATA_TYPE.get(cell.data_type)
    if kind is None:
        raise ValueError(f"Unknown cell data type {cell.data_type!r} at {cell.coordinate}")
    return CellContent(kind, value)


def write_content(cell: Cell, content: CellContent) -> None:
    """Write kind-tagged content into an existing cell.

    Raises:
        TypeError: If the cell is a merged-cell slot, which is read-only
    """
    if isinstance(cell, MergedCell):
        raise TypeError(f"Cannot write into merged cell {cell.coordinate}")
    cell._value = None if content.is_empty else content.value
    cell.data_type = _DATA_TYPE_BY_KIND[content.kind]


def clone_into(destination: Cell, source: Cell) -> None:
    """Copy style, comment and content from ``source`` onto ``destination``.

    The style array holds ids into the workbook's shared style tables, so
    after the copy both cells resolve to the same font, fill, border and
    number format objects. openpyxl binds a comment to a single cell, so
    the destination receives a copy carrying the same text and author.

    Formula text is copied verbatim: references are not adjusted for the
    destination's position and nothing is re-evaluated.

    Args:
        destination: An existing cell, created by the caller
        source: The cell to copy from; left unmodified
    """
    if isinstance(destination, MergedCell):
        raise TypeError(f"Cannot clone into merged cell {destination.coordinate}")

    destination._style = copy(source._style)
    destination.comment = source.comment
    write_content(destination, read_content(source))
