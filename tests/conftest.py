import io
import logging

import openpyxl
import pytest

from src.bom_summary import InputFile

# Silence noisy libraries so we can see our own debug logs
logging.getLogger("openpyxl").setLevel(logging.WARNING)


def build_workbook(sheets: dict[str, list[list]]) -> bytes:
    """
    Builds an .xlsx in memory.

    Args:
        sheets: Sheet name -> rows, written from cell A1 down.

    Returns:
        The workbook bytes.
    """
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    wb.close()
    return buf.getvalue()


def bom_rows(*parts: tuple) -> list[list]:
    """BOM sheet rows: a header, then (part, qty, description) tuples."""
    return [["Part Number", "Qty", "Description"]] + [list(p) for p in parts]


@pytest.fixture
def make_file():
    """Returns a factory: (name, sheets) -> InputFile."""

    def _make(name: str, sheets: dict[str, list[list]]) -> InputFile:
        return InputFile(name=name, content=build_workbook(sheets))

    return _make
