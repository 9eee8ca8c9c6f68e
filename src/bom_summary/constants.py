"""
Static configuration defaults for the BOM Summary engine.

This module serves as the central repository for:
1.  **Input Rules:** Which file extensions are accepted for a batch.
2.  **Sheet Heuristics:** The ordered list of known BOM sheet names.
3.  **Layout:** The row/column positions of the part number, quantity and
    description cells inside a BOM sheet.
4.  **Identity Lookup:** Fallback sheets and cells that carry the job number.
5.  **Sharing:** Share-token markers and the advisory length threshold.

Every value here can be overridden at runtime via a JSON config file
(see `src.bom_summary.config`).
"""

# --- Input Rules ---

# Case-sensitive on purpose: "BOM.XLSX" is not picked up.
SUPPORTED_EXTENSIONS = (".xlsx", ".xlsm")

# --- Sheet Heuristics ---

# Checked in order; the first one present in the workbook wins.
POSSIBLE_SHEET_NAMES = (
    "BOM",
    "Bill of Materials",
    "BOM Data",
    "CIFA BOM",
    "Parts List",
)

# Fallback: any sheet whose upper-cased name contains this token.
BOM_SHEET_TOKEN = "BOM"

# --- Layout ---

# 1-based spreadsheet row where part rows begin (row 1 is the header).
START_ROW = 2

# 0-based column indices within each row.
PART_COL_INDEX = 0  # A: CIFA part number
QTY_COL_INDEX = 1  # B: Quantity
DESC_COL_INDEX = 2  # C: Description

# --- Tiering ---

TIER_1 = "Tier 1"
TIER_2 = "Tier 2"

# Reference list of Tier 1 part numbers. Ships empty; supply via config.
TIER1_PART_NUMBERS: frozenset[str] = frozenset()

# --- Identity Lookup ---

JOB_PREFIX = "JB"

# (Sheet name, cell address) pairs tried in order when the file name has no ID.
ID_CELL_LOOKUPS = (
    ("Survey Data", "C7"),
    ("Enter Details", "I4"),
)

# --- Sharing ---

# Tokens above this length may be truncated by browsers or chat clients.
SHARE_TOKEN_WARN_LENGTH = 4000

# Marker for the compressed format. Legacy tokens carry no marker.
SHARE_CURRENT_PREFIX = "z:"

SHARE_FRAGMENT_KEY = "data"

# Upper bound on the inflated JSON of a compressed token.
SHARE_MAX_DECODED_BYTES = 16 * 1024 * 1024
