"""
Runtime configuration loading.

Defaults come from `src.bom_summary.constants`. A JSON file may override
any of them, e.g.:

    {
        "sheet_names": ["BOM", "Parts List"],
        "start_row": 11,
        "part_col": 1,
        "qty_col": 4,
        "desc_col": 2,
        "tier1_parts": ["CF-1001", "CF-1002"]
    }
"""

import json
import logging
import os
from collections.abc import Mapping
from typing import Any

from src.bom_summary.errors import ConfigError
from src.bom_summary.types import BomConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BOM_SUMMARY_CONFIG"

_INT_KEYS = ("start_row", "part_col", "qty_col", "desc_col")
_LIST_KEYS = ("sheet_names", "tier1_parts")


def _load_json_mapping(path: str) -> dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Malformed JSON in {os.path.basename(path)}: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise ConfigError(
            f"Configuration root must be an object in {os.path.basename(path)}"
        )

    return dict(raw)


def config_from_mapping(raw: Mapping[str, Any]) -> BomConfig:
    """
    Validates a mapping of overrides and builds a BomConfig.

    Raises:
        ConfigError: On unknown keys or values of the wrong type.
    """
    unknown = set(raw) - set(_INT_KEYS) - set(_LIST_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

    overrides: dict[str, Any] = {}
    for key in _INT_KEYS:
        if key in raw:
            value = raw[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"'{key}' must be a non-negative integer")
            overrides[key] = value

    if overrides.get("start_row") == 0:
        raise ConfigError("'start_row' is 1-based and must be at least 1")

    for key in _LIST_KEYS:
        if key in raw:
            value = raw[key]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"'{key}' must be a list of strings")
            overrides[key] = tuple(value) if key == "sheet_names" else frozenset(value)

    return BomConfig(**overrides)


def load_config(path: str | None = None) -> BomConfig:
    """
    Loads configuration from a JSON file.

    Args:
        path: File to read. Falls back to the BOM_SUMMARY_CONFIG environment
            variable, then to the built-in defaults.

    Returns:
        The immutable BomConfig for this run.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return BomConfig()

    config = config_from_mapping(_load_json_mapping(path))
    logger.info(
        f"Loaded config from {path}: {len(config.tier1_parts)} Tier 1 parts, "
        f"sheets {list(config.sheet_names)}"
    )
    return config
