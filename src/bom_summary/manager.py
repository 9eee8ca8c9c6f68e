"""
High-level aggregate management.

This module acts as the "Controller" for the BOM Summary engine. It handles:
- Folding per-file results into the cross-file aggregate.
- Flattening the aggregate into display rows.
- Sorting rows for display and export.
"""

import logging
from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import Any, Literal

from src.bom_summary import constants as C
from src.bom_summary.errors import NoBomDataError
from src.bom_summary.types import (
    BomConfig,
    PartRow,
    PartTable,
    ProcessedData,
    SingleFileResult,
)
from src.bom_summary.utils import compare_natural, sort_file_ids

logger = logging.getLogger(__name__)

Direction = Literal["ascending", "descending"]

SORT_KEYS = ("partNumber", "tier", "total_quantity", "description")
NUMERIC_KEYS = ("total_quantity",)

DEFAULT_SORT: tuple[str, Direction] = ("tier", "ascending")


def merge_file_results(
    results: Iterable[SingleFileResult], config: BomConfig | None = None
) -> ProcessedData:
    """
    Folds per-file results into one aggregate, one file at a time.

    Every file identifier is registered, even when the file produced no
    parts. Tier 1 membership is checked on every merge step.

    Args:
        results: Per-file results, in the order they should be merged.
        config: Supplies the Tier 1 reference set.

    Returns:
        The immutable ProcessedData.

    Raises:
        NoBomDataError: If no file contributed a single part.
    """
    config = config or BomConfig()
    table = PartTable()
    file_ids: set[str] = set()

    for result in results:
        file_id = result["file_id"]
        if file_id in file_ids:
            logger.debug(f"Identifier {file_id} shared by several files; summing")
        file_ids.add(file_id)

        for part_number, local in result["parts"].items():
            table.add_part(
                file_id,
                part_number,
                local["quantity"],
                local["description"],
                is_tier1=part_number in config.tier1_parts,
            )

    if not table:
        raise NoBomDataError(
            "No valid BOM data found to summarize across the provided files."
        )

    logger.info(f"Merged {len(table)} parts from {len(file_ids)} files")
    return table.freeze(sort_file_ids(file_ids))


def build_part_rows(data: ProcessedData) -> list[PartRow]:
    """Flattens the aggregate into one row per part number."""
    return [
        {
            "partNumber": part_number,
            "tier": part["tier"],
            "total_quantity": part["total_quantity"],
            "description": part["description"],
            "file_quantities": part["file_quantities"],
        }
        for part_number, part in data.parts.items()
    ]


def summarize(data: ProcessedData) -> str:
    """One-line summary for result headers."""
    return (
        f"Found {len(data.parts)} unique parts across {len(data.file_ids)} files."
    )


def _compare_baseline(a: PartRow, b: PartRow) -> int:
    """Tier 1 first, then larger total quantity first."""
    a_t1 = a["tier"] == C.TIER_1
    b_t1 = b["tier"] == C.TIER_1
    if a_t1 and not b_t1:
        return -1
    if b_t1 and not a_t1:
        return 1
    return b["total_quantity"] - a["total_quantity"]


def _compare_values(a_val: Any, b_val: Any) -> int:
    if a_val is None or b_val is None:
        return 0
    if isinstance(a_val, int) and isinstance(b_val, int):
        return (a_val > b_val) - (a_val < b_val)
    return compare_natural(str(a_val), str(b_val))


def sort_parts(
    rows: Sequence[PartRow],
    key: str | None = None,
    direction: Direction = "ascending",
    file_ids: Sequence[str] = (),
) -> list[PartRow]:
    """
    Sorts rows for display.

    Sorting hierarchy:
    1. The requested column (if any), in the requested direction.
    2. Tier 1 before Tier 2.
    3. Total quantity, largest first.

    The tie-break (2, 3) never flips with the direction.

    Args:
        rows: The unsorted rows; not mutated.
        key: "partNumber", "tier", "total_quantity", "description", a file
            identifier from `file_ids`, or None for the baseline order only.
        direction: "ascending" or "descending".
        file_ids: The aggregate's file identifiers (quantity columns).

    Returns:
        A new sorted list.

    Raises:
        ValueError: If the key or direction is not recognised.
    """
    if direction not in ("ascending", "descending"):
        raise ValueError(f"Unknown sort direction: {direction!r}")

    baseline = sorted(rows, key=cmp_to_key(_compare_baseline))
    if key is None:
        return baseline

    if key in file_ids:

        def value(row: PartRow) -> Any:
            return row["file_quantities"].get(key, 0)

    elif key in SORT_KEYS:

        def value(row: PartRow) -> Any:
            return row[key]  # type: ignore[literal-required]

    else:
        raise ValueError(f"Unknown sort key: {key!r}")

    sign = 1 if direction == "ascending" else -1

    def compare(a: PartRow, b: PartRow) -> int:
        result = _compare_values(value(a), value(b))
        if result == 0:
            return _compare_baseline(a, b)
        return sign * result

    return sorted(baseline, key=cmp_to_key(compare))


def toggle_sort(
    current: tuple[str, Direction] | None, key: str
) -> tuple[str, Direction]:
    """
    Next sort state after a column header click.

    Clicking the active ascending column flips it to descending; anything
    else sorts the clicked column ascending.
    """
    if current is not None and current == (key, "ascending"):
        return key, "descending"
    return key, "ascending"
