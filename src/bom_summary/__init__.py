"""
BOM Summary Library (Package Entry Point).

Exposes the core logic and data structures for workbook ingestion,
cross-file aggregation, sorting and share-token encoding.
"""

from .codec import (
    build_share_url,
    decode_share_token,
    encode_share_token,
    extract_share_token,
    is_token_too_long,
)
from .config import load_config
from .errors import (
    BomSummaryError,
    ConfigError,
    NoBomDataError,
    NoSupportedFilesError,
    ShareTokenError,
)
from .identity import get_id_from_cell_value, resolve_file_id
from .loader import InputFile, load_folder, process_excel_files
from .manager import (
    DEFAULT_SORT,
    build_part_rows,
    merge_file_results,
    sort_parts,
    summarize,
    toggle_sort,
)
from .parser import extract_records, process_single_file, select_sheet
from .types import (
    BomConfig,
    PartData,
    PartRow,
    PartTable,
    ProcessedData,
    SingleFileResult,
    merge_part_records,
)
from .utils import cell_to_str, coerce_quantity, natural_sort_key

__all__ = [
    # types
    "BomConfig",
    "PartData",
    "PartRow",
    "PartTable",
    "ProcessedData",
    "SingleFileResult",
    "merge_part_records",
    # errors
    "BomSummaryError",
    "ConfigError",
    "NoBomDataError",
    "NoSupportedFilesError",
    "ShareTokenError",
    # utils
    "cell_to_str",
    "coerce_quantity",
    "natural_sort_key",
    # identity
    "get_id_from_cell_value",
    "resolve_file_id",
    # parser
    "extract_records",
    "process_single_file",
    "select_sheet",
    # manager
    "DEFAULT_SORT",
    "build_part_rows",
    "merge_file_results",
    "sort_parts",
    "summarize",
    "toggle_sort",
    # loader
    "InputFile",
    "load_folder",
    "process_excel_files",
    # codec
    "build_share_url",
    "decode_share_token",
    "encode_share_token",
    "extract_share_token",
    "is_token_too_long",
    # config
    "load_config",
]
