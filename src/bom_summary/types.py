"""
Type definitions and shared data structures for the BOM Summary engine.

This module contains the TypedDicts, the aggregate container and the
configuration bundle passed between the extraction, merge, sorting and
sharing stages.
"""

from collections import UserDict
from dataclasses import dataclass
from typing import Any, Literal, TypedDict

from src.bom_summary import constants as C

Tier = Literal["Tier 1", "Tier 2"]


class PartData(TypedDict):
    """
    Aggregate data for one part number across every processed file.

    Attributes:
        description: First non-empty description seen, never overwritten.
        total_quantity: Sum of `file_quantities` values.
        file_quantities: Mapping of file identifier to contributed quantity.
        tier: "Tier 1" if the part is in the reference list, else "Tier 2".
    """

    description: str | None
    total_quantity: int
    file_quantities: dict[str, int]
    tier: Tier


class LocalPartData(TypedDict):
    """Per-file accumulation for one part number (before merging)."""

    quantity: int
    description: str | None


class SingleFileResult(TypedDict):
    """
    Outcome of processing one input file.

    Attributes:
        file_id: Resolved identifier (never empty).
        parts: Part number -> summed quantity and first description.
        success: True if a BOM sheet was found and walked.
        error: Message of the file-level failure, if any.
    """

    file_id: str
    parts: dict[str, LocalPartData]
    success: bool
    error: str | None


class PartRow(TypedDict):
    """Flattened view of one part, as shown in tables and exports."""

    partNumber: str
    tier: Tier
    total_quantity: int
    description: str | None
    file_quantities: dict[str, int]


@dataclass(frozen=True)
class BomConfig:
    """
    Extraction and tiering settings, loaded once per run.

    Attributes:
        sheet_names: Preferred BOM sheet names, in priority order.
        start_row: 1-based row number where part rows begin.
        part_col: 0-based column index of the part number.
        qty_col: 0-based column index of the quantity.
        desc_col: 0-based column index of the description.
        tier1_parts: Reference set of Tier 1 part numbers.
    """

    sheet_names: tuple[str, ...] = C.POSSIBLE_SHEET_NAMES
    start_row: int = C.START_ROW
    part_col: int = C.PART_COL_INDEX
    qty_col: int = C.QTY_COL_INDEX
    desc_col: int = C.DESC_COL_INDEX
    tier1_parts: frozenset[str] = C.TIER1_PART_NUMBERS


@dataclass(frozen=True)
class ProcessedData:
    """
    The merged, cross-file aggregate.

    Built once by the aggregation step and only read afterwards.

    Attributes:
        parts: Part number -> PartData.
        file_ids: Distinct file identifiers in natural sort order.
    """

    parts: dict[str, PartData]
    file_ids: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Returns the interchange shape used by share tokens."""
        return {
            "parts": {
                key: {
                    "description": part["description"],
                    "total_quantity": part["total_quantity"],
                    "file_quantities": dict(part["file_quantities"]),
                    "tier": part["tier"],
                }
                for key, part in self.parts.items()
            },
            "fileIds": list(self.file_ids),
        }


def merge_part_records(left: PartData, right: PartData) -> PartData:
    """
    Combines two records for the same part number into a new record.

    Quantities add per file, the left description wins when it is set, and
    Tier 1 wins over Tier 2. The operation is associative, so folding file
    results in any grouping gives the same record.

    Args:
        left: The record accumulated so far.
        right: The incoming record.

    Returns:
        A new PartData; neither input is mutated.
    """
    file_quantities = dict(left["file_quantities"])
    for file_id, qty in right["file_quantities"].items():
        file_quantities[file_id] = file_quantities.get(file_id, 0) + qty

    tier: Tier = C.TIER_2
    if C.TIER_1 in (left["tier"], right["tier"]):
        tier = C.TIER_1

    return {
        "description": left["description"] or right["description"] or None,
        "total_quantity": left["total_quantity"] + right["total_quantity"],
        "file_quantities": file_quantities,
        "tier": tier,
    }


class PartTable(UserDict):
    """
    Mutable accumulator used while folding file results together.

    Keeps `total_quantity` in step with `file_quantities` and never lets a
    Tier 1 part fall back to Tier 2.
    """

    def add_part(
        self,
        file_id: str,
        part_number: str,
        qty: int,
        description: str | None,
        is_tier1: bool = False,
    ) -> None:
        """
        Records one file's contribution for a part.

        Args:
            file_id: Identifier of the contributing file.
            part_number: Raw part number key (no normalization).
            qty: Quantity contributed by that file.
            description: Description from that file, if any.
            is_tier1: Whether the part is in the Tier 1 reference set.
        """
        incoming: PartData = {
            "description": description or None,
            "total_quantity": qty,
            "file_quantities": {file_id: qty},
            "tier": C.TIER_1 if is_tier1 else C.TIER_2,
        }
        if part_number in self.data:
            self.data[part_number] = merge_part_records(
                self.data[part_number], incoming
            )
        else:
            self.data[part_number] = incoming

    def freeze(self, file_ids: tuple[str, ...]) -> ProcessedData:
        """Snapshots the table into an immutable aggregate."""
        return ProcessedData(parts=dict(self.data), file_ids=file_ids)
