"""
Workbook ingestion and BOM row extraction.

This module handles everything that happens to a single input file:
opening the workbook, resolving its identifier, choosing the BOM sheet and
walking its rows into a per-file part map. Files never raise out of here;
failures are logged and reported on the returned result.
"""

import io
import logging
from collections.abc import Iterable, Sequence
from itertools import islice
from typing import Any

import openpyxl

from src.bom_summary import constants as C
from src.bom_summary.identity import resolve_file_id
from src.bom_summary.types import BomConfig, LocalPartData, SingleFileResult
from src.bom_summary.utils import cell_to_str, coerce_quantity

# Initialize Logger
logger = logging.getLogger(__name__)


def select_sheet(
    sheet_names: Sequence[str],
    preferred: Sequence[str] = C.POSSIBLE_SHEET_NAMES,
) -> str | None:
    """
    Picks the sheet that holds the BOM rows.

    Args:
        sheet_names: The workbook's sheet names, in workbook order.
        preferred: Known BOM sheet names, in priority order.

    Returns:
        The first preferred name present, else the first sheet whose name
        contains "BOM" (any case), else None.
    """
    for name in preferred:
        if name in sheet_names:
            return name

    for name in sheet_names:
        if C.BOM_SHEET_TOKEN in name.upper():
            return name

    return None


def _cell(row: Sequence[Any], index: int) -> Any:
    if index < len(row):
        return row[index]
    return None


def extract_records(
    rows: Iterable[Sequence[Any]], config: BomConfig | None = None
) -> dict[str, LocalPartData]:
    """
    Walks BOM rows and sums quantities per part number.

    Rows are skipped when the part number is blank, the quantity cell is
    empty, the quantity does not parse, or it truncates to zero. Part
    numbers are used exactly as typed (no trimming or case folding).

    Args:
        rows: Row grid of raw cell values, starting at spreadsheet row 1.
        config: Layout settings (start row and column indices).

    Returns:
        Part number -> {"quantity", "description"} for this file.
    """
    config = config or BomConfig()
    parts: dict[str, LocalPartData] = {}

    for row in islice(rows, max(config.start_row - 1, 0), None):
        try:
            part_raw = _cell(row, config.part_col)
            qty_raw = _cell(row, config.qty_col)
            desc_raw = _cell(row, config.desc_col)

            if not part_raw or qty_raw is None:
                continue

            qty = coerce_quantity(qty_raw)
            if not qty:
                continue

            key = cell_to_str(part_raw)
            entry = parts.setdefault(key, {"quantity": 0, "description": None})
            entry["quantity"] += qty
            if entry["description"] is None and desc_raw:
                entry["description"] = cell_to_str(desc_raw)
        except Exception:
            # A malformed row never aborts the file
            continue

    return parts


def read_workbook(content: bytes) -> openpyxl.Workbook:
    """
    Decodes workbook bytes.

    Formula cells yield their cached values, matching what Excel displays.
    """
    return openpyxl.load_workbook(io.BytesIO(content), data_only=True)


def process_single_file(
    file_name: str, content: bytes, config: BomConfig | None = None
) -> SingleFileResult:
    """
    Resolves the identity of one file and extracts its BOM rows.

    Args:
        file_name: The uploaded file name.
        content: Raw workbook bytes.
        config: Extraction settings.

    Returns:
        A SingleFileResult. On a file-level failure the part map is empty,
        `error` carries the message and the identifier falls back to the
        file name rules.
    """
    config = config or BomConfig()
    file_id: str | None = None
    parts: dict[str, LocalPartData] = {}
    success = False
    error: str | None = None

    try:
        workbook = read_workbook(content)
        file_id = resolve_file_id(file_name, workbook)

        sheet_name = select_sheet(workbook.sheetnames, config.sheet_names)
        if sheet_name:
            success = True
            sheet = workbook[sheet_name]
            parts = extract_records(sheet.iter_rows(values_only=True), config)
        else:
            logger.info(f"No BOM sheet in {file_name}; sheets: {workbook.sheetnames}")
    except Exception as e:
        logger.error(f"Error processing file {file_name}: {e}")
        error = str(e)
        success = False
        parts = {}

    if not file_id:
        file_id = resolve_file_id(file_name)

    return {"file_id": file_id, "parts": parts, "success": success, "error": error}
