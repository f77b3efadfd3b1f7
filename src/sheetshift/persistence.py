"""
Saving and loading workbooks.

``save_workbook`` writes to a temporary file beside the target and swaps it
into place, so a failed save never leaves a truncated file behind and any
previous file at the path survives intact.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Union
from zipfile import BadZipFile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook

from sheetshift.exceptions import MissingWorkbookError, WorkbookLoadError, WorkbookSaveError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def save_workbook(workbook: Workbook, path: PathLike) -> Path:
    """Write a workbook to ``path``, overwriting any existing file.

    The workbook is flagged for a full recalculation when next opened, since
    openpyxl does not store freshly computed formula results.

    Returns:
        The resolved path that was written.

    Raises:
        MissingWorkbookError: If workbook is None
        WorkbookSaveError: If the file cannot be written
    """
    if workbook is None:
        raise MissingWorkbookError("Error: Workbook can not be None")

    target = Path(path)
    workbook.calculation.fullCalcOnLoad = True

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        os.close(fd)
        workbook.save(tmp_name)
        os.chmod(tmp_name, _file_mode(target))
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as exc:
        logger.error("Failed to save workbook to %s: %s", target, exc)
        raise WorkbookSaveError(f"Could not save workbook to {target}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.info("Saved workbook to %s", target)
    return target.resolve()


def _file_mode(target: Path) -> int:
    """Permission bits for the saved file.

    An existing file keeps its mode; a new one gets the process umask
    default, as if it had been created with ``open()``.
    """
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def load_workbook(path: PathLike) -> Workbook:
    """Open an xlsx file with formulas kept as text.

    Raises:
        WorkbookLoadError: If the file is missing or is not a valid workbook
    """
    source = Path(path)
    try:
        workbook = openpyxl.load_workbook(source)
    except (OSError, BadZipFile, InvalidFileException, KeyError) as exc:
        logger.error("Failed to load workbook from %s: %s", source, exc)
        raise WorkbookLoadError(f"Could not load workbook from {source}: {exc}") from exc

    logger.debug("Loaded workbook %s with sheets %s", source, workbook.sheetnames)
    return workbook
