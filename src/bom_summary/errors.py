"""
Exception taxonomy for the BOM Summary engine.

Only batch-level failures are raised to the caller. Row-level problems are
skipped silently and file-level problems are logged and recorded on the
per-file result instead.
"""


class BomSummaryError(Exception):
    """Base class for every error surfaced by the engine."""


class NoSupportedFilesError(BomSummaryError, ValueError):
    """Raised when a batch contains no .xlsx/.xlsm files."""


class NoBomDataError(BomSummaryError):
    """Raised when every file was processed but no part rows were found."""


class ShareTokenError(BomSummaryError, ValueError):
    """Raised when a share token is corrupted or structurally invalid."""


class ConfigError(BomSummaryError):
    """Raised when configuration data cannot be loaded or validated."""
