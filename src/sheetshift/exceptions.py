"""
Exception classes for sheetshift.

Every exception derives from ``SheetShiftError`` and from the built-in
exception that best describes the condition, so callers may catch either.
"""


class SheetShiftError(Exception):
    """Base class for all sheetshift errors."""
    pass


class InvalidColumnIndexError(SheetShiftError, ValueError):
    """Raised when a column index is negative or not an integer.

    Column indices are zero-based: 0 is column "A". Booleans are rejected
    even though they are ``int`` subclasses.
    """
    pass


class InvalidColumnLabelError(SheetShiftError, ValueError):
    """Raised when a column label is empty or contains non A-Z characters."""
    pass


class MissingWorkbookError(SheetShiftError, ValueError):
    """Raised when an operation receives ``None`` instead of a workbook."""
    pass


class MissingSheetError(SheetShiftError, LookupError):
    """Raised when a sheet index or name does not exist in the workbook."""
    pass


class MissingRowError(SheetShiftError, LookupError):
    """Raised when the row used to probe the sheet width holds no cells.

    Only raised when the caller pins width discovery to a single row;
    the default discovery scans every row.
    """
    pass


class WorkbookSaveError(SheetShiftError, OSError):
    """Raised when a workbook cannot be written to its target path.

    The original ``OSError`` is chained as ``__cause__``. Any file already
    present at the target path is left unchanged.
    """
    pass


class WorkbookLoadError(SheetShiftError, OSError):
    """Raised when a workbook file cannot be opened or parsed."""
    pass
