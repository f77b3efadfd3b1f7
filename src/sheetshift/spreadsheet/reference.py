"""
Column labels and A1 references.

This module converts between zero-based column indices and the alphabetic
labels spreadsheets use in formulas:
- column_label: 0 -> "A", 25 -> "Z", 26 -> "AA", 701 -> "ZZ", 702 -> "AAA"
- column_index: the exact inverse of column_label
- Range: a rectangular cell region rendered in A1 notation (e.g., B2:D10)

Labels form a bijective base-26 numeral system: there is no zero digit, so
"Z" is followed directly by "AA" and every index has exactly one label.
"""

import re
from typing import Optional

from sheetshift.exceptions import InvalidColumnIndexError, InvalidColumnLabelError

LETTERS = 26
_FIRST_LETTER = ord("A")
_LABEL_RE = re.compile(r"^[A-Z]+$")
_CELL_RE = re.compile(r"^([A-Z]+)(\d+)$")


def column_label(index: int) -> str:
    """Convert a zero-based column index to its alphabetic label.

    Each step takes ``index % 26`` as the next letter (least significant
    first), then moves to ``index // 26 - 1``. The decrement is what makes
    the numbering bijective: the leading letter of a multi-letter label
    counts from "A" = 1, not from "A" = 0.

    Args:
        index: Column index (0-indexed: 0 = A, 25 = Z, 26 = AA)

    Returns:
        Column label in upper case

    Raises:
        InvalidColumnIndexError: If index is negative or not an integer
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidColumnIndexError(f"Column index must be an integer, got {index!r}")
    if index < 0:
        raise InvalidColumnIndexError(f"Column index must be non-negative, got {index}")

    letters = []
    while index >= 0:
        index, digit = divmod(index, LETTERS)
        letters.append(chr(_FIRST_LETTER + digit))
        index -= 1
    return "".join(reversed(letters))


def column_index(label: str) -> int:
    """Convert a column label back to its zero-based index.

    Args:
        label: Column label (A, Z, AA, etc.), case-insensitive

    Returns:
        Column index (0-indexed: A = 0, Z = 25, AA = 26)

    Raises:
        InvalidColumnLabelError: If label is empty or not purely alphabetic
    """
    if not isinstance(label, str):
        raise InvalidColumnLabelError(f"Column label must be a string, got {label!r}")
    letters = label.strip().upper()
    if not _LABEL_RE.match(letters):
        raise InvalidColumnLabelError(f"Invalid column label: {label!r}")

    index = 0
    for char in letters:
        index = index * LETTERS + (ord(char) - _FIRST_LETTER + 1)
    return index - 1


class Range:
    """Represents a rectangular cell region in A1 notation.

    Coordinates are 0-indexed internally and converted to 1-indexed rows
    and alphabetic columns by to_a1().

    Attributes:
        row: Starting row (0-indexed)
        col: Starting column (0-indexed)
        row_end: Ending row (0-indexed, inclusive)
        col_end: Ending column (0-indexed, inclusive)
    """

    def __init__(
        self,
        row: int,
        col: int,
        row_end: Optional[int] = None,
        col_end: Optional[int] = None
    ) -> None:
        """Initialize a Range with 0-indexed coordinates.

        Args:
            row: Starting row (0-indexed, non-negative)
            col: Starting column (0-indexed, non-negative)
            row_end: Ending row (defaults to row for a single cell)
            col_end: Ending column (defaults to col for a single cell)

        Raises:
            ValueError: If coordinates are invalid
        """
        if row < 0 or col < 0:
            raise ValueError("Row and column must be non-negative (0-indexed)")

        self.row = row
        self.col = col
        self.row_end = row_end if row_end is not None else row
        self.col_end = col_end if col_end is not None else col

        if self.row_end < self.row or self.col_end < self.col:
            raise ValueError("End coordinates must be >= start coordinates")

    @classmethod
    def from_a1(cls, notation: str) -> "Range":
        """Parse A1 notation (``C3`` or ``A1:B10``) into a 0-indexed Range.

        Raises:
            ValueError: If notation is invalid
        """
        notation = notation.strip().upper()
        if not notation:
            raise ValueError("Empty range notation")

        parts = notation.split(":")
        if len(parts) > 2:
            raise ValueError(f"Invalid range notation: {notation}")

        corners = []
        for part in parts:
            match = _CELL_RE.match(part.strip())
            if not match or int(match.group(2)) < 1:
                raise ValueError(f"Invalid cell notation: {part}")
            letters, row_str = match.groups()
            corners.append((int(row_str) - 1, column_index(letters)))

        (row, col), (row_end, col_end) = corners[0], corners[-1]
        return cls(row=row, col=col, row_end=row_end, col_end=col_end)

    def to_a1(self) -> str:
        """Convert Range to A1 notation (e.g., "A1" or "A1:B10")."""
        start_cell = f"{column_label(self.col)}{self.row + 1}"
        if self.row == self.row_end and self.col == self.col_end:
            return start_cell
        end_cell = f"{column_label(self.col_end)}{self.row_end + 1}"
        return f"{start_cell}:{end_cell}"

    def offset(self, row_offset: int = 0, col_offset: int = 0) -> "Range":
        """Create a new Range offset by the given amounts.

        Raises:
            ValueError: If the offset moves the start below zero
        """
        new_row = self.row + row_offset
        new_col = self.col + col_offset
        if new_row < 0 or new_col < 0:
            raise ValueError("Offset results in invalid coordinates (< 0)")

        return Range(
            row=new_row,
            col=new_col,
            row_end=self.row_end + row_offset,
            col_end=self.col_end + col_offset,
        )

    def __repr__(self) -> str:
        return f"Range({self.to_a1()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return (
            self.row == other.row
            and self.col == other.col
            and self.row_end == other.row_end
            and self.col_end == other.col_end
        )
