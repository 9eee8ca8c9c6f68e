import importlib

import pytest

import src.bom_summary as bom_summary
from src.bom_summary import errors

SUBMODULES = [
    "constants",
    "errors",
    "types",
    "utils",
    "identity",
    "parser",
    "manager",
    "loader",
    "codec",
    "config",
]


@pytest.mark.parametrize("name", SUBMODULES)
def test_submodules_import_on_their_own(name):
    module = importlib.import_module(f"src.bom_summary.{name}")
    assert module.__name__ == f"src.bom_summary.{name}"


def test_every_exported_name_resolves():
    missing = [name for name in bom_summary.__all__ if not hasattr(bom_summary, name)]
    assert missing == []
    assert len(set(bom_summary.__all__)) == len(bom_summary.__all__)


@pytest.mark.parametrize(
    "error, also",
    [
        (errors.NoSupportedFilesError, ValueError),
        (errors.ShareTokenError, ValueError),
        (errors.NoBomDataError, errors.BomSummaryError),
        (errors.ConfigError, errors.BomSummaryError),
    ],
)
def test_error_hierarchy(error, also):
    """Front ends catch BomSummaryError; input errors stay ValueErrors."""
    assert issubclass(error, errors.BomSummaryError)
    assert issubclass(error, also)


def test_default_config_matches_constants():
    from src.bom_summary import constants as C

    config = bom_summary.BomConfig()
    assert config.sheet_names == C.POSSIBLE_SHEET_NAMES
    assert config.start_row == C.START_ROW
    assert (config.part_col, config.qty_col, config.desc_col) == (
        C.PART_COL_INDEX,
        C.QTY_COL_INDEX,
        C.DESC_COL_INDEX,
    )
    assert bom_summary.DEFAULT_SORT == ("tier", "ascending")
