"""
File identity resolution.

Every input file is labelled with a job number ("JB" + 7 digits) when one can
be found, falling back through:
1. A 7-digit run anywhere in the file name.
2. Cell C7 of the "Survey Data" sheet.
3. Cell I4 of the "Enter Details" sheet.
4. The raw file name, extension included.

Two files that both fall through to step 4 with the same name share one
identifier; their quantities are summed under it.
"""

import logging
import re
from typing import Any

from src.bom_summary import constants as C
from src.bom_summary.utils import cell_to_str

logger = logging.getLogger(__name__)

_NAME_ID = re.compile(r"\d{7}", re.ASCII)
_PADDED_ID = re.compile(r"JB000(\d{7})", re.IGNORECASE | re.ASCII)
_TRAILING_ID = re.compile(r"(\d{7})$", re.ASCII)


def get_id_from_filename(file_name: str) -> str | None:
    """
    Looks for a job number embedded in the file name.

    Args:
        file_name: The file name (e.g., "Survey_1234567_rev2.xlsx").

    Returns:
        "JB" + the first 7-digit run, or None.
    """
    match = _NAME_ID.search(file_name)
    if match:
        return C.JOB_PREFIX + match.group(0)
    return None


def get_id_from_cell_value(value: Any) -> str | None:
    """
    Extracts a job number from a cell value.

    Accepts the zero-padded form ("JB0001234567", any case) or any value that
    ends in a 7-digit run ("Job 1234567").

    Args:
        value: Raw cell value.

    Returns:
        "JB" + 7 digits, or None if the value carries no job number.
    """
    if not value:
        return None
    text = cell_to_str(value).strip()

    match = _PADDED_ID.search(text)
    if match:
        return C.JOB_PREFIX + match.group(1)

    match = _TRAILING_ID.search(text)
    if match:
        return C.JOB_PREFIX + match.group(1)

    return None


def get_id_from_workbook(workbook: Any) -> str | None:
    """
    Reads the job number from the known identity cells of a workbook.

    Args:
        workbook: An openpyxl Workbook (anything with `sheetnames` and
            `wb[sheet][address].value`).

    Returns:
        The first job number found, or None.
    """
    sheet_names = workbook.sheetnames
    for sheet_name, address in C.ID_CELL_LOOKUPS:
        if sheet_name not in sheet_names:
            continue
        file_id = get_id_from_cell_value(workbook[sheet_name][address].value)
        if file_id:
            return file_id
    return None


def resolve_file_id(file_name: str, workbook: Any | None = None) -> str:
    """
    Resolves the identifier for one input file. Never fails.

    Args:
        file_name: The file name as uploaded.
        workbook: The decoded workbook, or None if it could not be opened.

    Returns:
        A non-empty identifier.
    """
    file_id = get_id_from_filename(file_name)
    if file_id:
        return file_id

    if workbook is not None:
        file_id = get_id_from_workbook(workbook)
        if file_id:
            return file_id

    logger.debug(f"No job number for {file_name}; using the file name")
    return file_name
