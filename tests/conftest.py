"""Shared pytest configuration and fixtures for sheetshift tests."""

import openpyxl
import pytest
from openpyxl.comments import Comment
from openpyxl.styles import Font, PatternFill


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked @pytest.mark.slow (e.g. exhaustive label sweeps)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="slow test — pass --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def workbook() -> openpyxl.Workbook:
    """Three rows of a name column followed by two numeric columns."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Data"
    for row in (["Name", 1, 2], ["Alice", 3, 4], ["Bob", 5, 6]):
        ws.append(row)
    ws.column_dimensions["A"].width = 20
    ws.column_dimensions["B"].width = 12
    ws.column_dimensions["C"].width = 15
    return wb


@pytest.fixture
def mixed_workbook() -> openpyxl.Workbook:
    """One row holding every cell kind, with styling and a comment on B1."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Mixed"
    ws["A1"] = "label"
    ws["B1"] = 42
    ws["B1"].font = Font(bold=True)
    ws["B1"].fill = PatternFill(fill_type="solid", start_color="FFFF00")
    ws["B1"].number_format = "0.00"
    ws["B1"].comment = Comment("check this", "auditor")
    ws["C1"] = True
    ws["D1"] = "=B1*2"
    ws["E1"] = "#N/A"
    return wb
