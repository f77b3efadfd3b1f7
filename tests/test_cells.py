"""
Unit tests for kind-tagged cell content and cell cloning.

Tests cover:
- read_content: kind detection for every openpyxl data type
- write_content: type tags are written, not re-inferred
- clone_into: value, kind, style and comment carried to the destination
"""

import datetime

import openpyxl
import pytest
from openpyxl.worksheet.formula import ArrayFormula

from sheetshift.spreadsheet.cells import (
    BLANK,
    CellContent,
    CellKind,
    clone_into,
    read_content,
    write_content,
)


@pytest.fixture
def ws():
    return openpyxl.Workbook().active


class TestReadContent:
    """Test suite for read_content."""

    @pytest.mark.parametrize("value, kind", [
        (True, CellKind.BOOLEAN),
        (3.5, CellKind.NUMERIC),
        (7, CellKind.NUMERIC),
        ("text", CellKind.STRING),
        ("#DIV/0!", CellKind.ERROR),
        ("=SUM(A1:A3)", CellKind.FORMULA),
        (datetime.datetime(2024, 1, 31, 12, 0), CellKind.DATE),
    ])
    def test_kinds(self, ws, value, kind):
        """Each assigned value is read back with its kind and payload."""
        ws["A1"] = value
        assert read_content(ws["A1"]) == CellContent(kind, value)

    def test_empty_cell_is_blank(self, ws):
        """A cell holding no value is BLANK."""
        assert read_content(ws["A1"]) is BLANK

    def test_merged_slot_is_none(self, ws):
        """Covered cells of a merged range report NONE."""
        ws["A1"] = "merged"
        ws.merge_cells("A1:B1")
        assert read_content(ws["B1"]).kind is CellKind.NONE

    def test_unknown_data_type(self, ws):
        """An unrecognised type tag raises ValueError."""
        ws["A1"] = 1
        ws["A1"].data_type = "x"
        with pytest.raises(ValueError, match="Unknown cell data type"):
            read_content(ws["A1"])


class TestWriteContent:
    """Test suite for write_content."""

    def test_string_starting_with_equals_stays_string(self, ws):
        """Text that looks like a formula is not turned into one."""
        write_content(ws["A1"], CellContent(CellKind.STRING, "=not a formula"))
        assert ws["A1"].data_type == "s"
        assert ws["A1"].value == "=not a formula"

    def test_blank_clears_value(self, ws):
        """Writing BLANK leaves the cell valueless with a numeric tag."""
        ws["A1"] = "old"
        write_content(ws["A1"], BLANK)
        assert ws["A1"].value is None
        assert ws["A1"].data_type == "n"

    def test_none_clears_value(self, ws):
        """Writing NONE carries no value either."""
        ws["A1"] = 5
        write_content(ws["A1"], CellContent(CellKind.NONE))
        assert ws["A1"].value is None

    def test_merged_destination_rejected(self, ws):
        """Merged-cell slots are read-only."""
        ws.merge_cells("A1:B1")
        with pytest.raises(TypeError, match="merged cell"):
            write_content(ws["B1"], CellContent(CellKind.NUMERIC, 1))


class TestCloneInto:
    """Test suite for clone_into."""

    @pytest.mark.parametrize("value", [
        False,
        2.25,
        "hello",
        "#REF!",
        "=A1+1",
        datetime.date(2020, 2, 29),
    ])
    def test_value_and_kind_preserved(self, ws, value):
        """Every valued kind is copied with its payload and tag intact."""
        ws["A1"] = value
        clone_into(ws["B2"], ws["A1"])
        assert read_content(ws["B2"]) == read_content(ws["A1"])
        assert ws["B2"].data_type == ws["A1"].data_type

    def test_formula_text_not_adjusted(self, ws):
        """Formula references are copied verbatim, not moved with the cell."""
        ws["B1"] = "=A1*2"
        clone_into(ws["C1"], ws["B1"])
        assert ws["C1"].value == "=A1*2"

    def test_array_formula_copied(self, ws):
        """Array formulas keep their text."""
        ws["A1"] = ArrayFormula("A1", "=SUM(B1:B3*C1:C3)")
        clone_into(ws["D1"], ws["A1"])
        content = read_content(ws["D1"])
        assert content.kind is CellKind.FORMULA
        assert content.value.text == "=SUM(B1:B3*C1:C3)"

    def test_blank_source_leaves_destination_valueless(self, ws):
        """Cloning a blank over a valued cell empties it."""
        ws["B1"] = "stale"
        clone_into(ws["B1"], ws["A1"])
        assert ws["B1"].value is None

    def test_merged_source_leaves_destination_valueless(self, ws):
        """Cloning a merged slot copies no value."""
        ws["A1"] = "merged"
        ws.merge_cells("A1:B1")
        ws["C1"] = "stale"
        clone_into(ws["C1"], ws["B1"])
        assert ws["C1"].value is None

    def test_style_shared(self, mixed_workbook):
        """Destination points at the same shared style table entries as the source."""
        ws = mixed_workbook.active
        clone_into(ws["B5"], ws["B1"])
        assert ws["B5"]._style == ws["B1"]._style
        assert ws["B5"]._style.fontId == ws["B1"]._style.fontId
        assert ws["B5"]._style.fillId == ws["B1"]._style.fillId
        assert ws["B5"].font == ws["B1"].font
        assert ws["B5"].font.bold
        assert ws["B5"].number_format == "0.00"
        assert ws["B5"].has_style

    def test_style_array_not_aliased(self, mixed_workbook):
        """Restyling the destination afterwards leaves the source alone."""
        ws = mixed_workbook.active
        clone_into(ws["B5"], ws["B1"])
        ws["B5"].font = openpyxl.styles.Font(italic=True)
        assert ws["B1"].font.bold
        assert not ws["B1"].font.italic

    def test_comment_copied(self, mixed_workbook):
        """Destination carries a comment with the source's text and author."""
        ws = mixed_workbook.active
        clone_into(ws["B5"], ws["B1"])
        assert ws["B5"].comment.text == "check this"
        assert ws["B5"].comment.author == "auditor"
        assert ws["B1"].comment.parent is ws["B1"]

    def test_missing_comment_clears_destination(self, mixed_workbook):
        """A source without a comment removes the destination's comment."""
        ws = mixed_workbook.active
        clone_into(ws["B1"], ws["A1"])
        assert ws["B1"].comment is None

    def test_source_unchanged(self, mixed_workbook):
        """Cloning never mutates the source."""
        ws = mixed_workbook.active
        before = read_content(ws["D1"])
        clone_into(ws["F1"], ws["D1"])
        assert read_content(ws["D1"]) == before

    def test_merged_destination_rejected(self, ws):
        """Cloning into a merged slot raises TypeError."""
        ws["C1"] = 1
        ws.merge_cells("A1:B1")
        with pytest.raises(TypeError, match="merged cell"):
            clone_into(ws["B1"], ws["C1"])
