import json

import pytest

from src.bom_summary import BomConfig, ConfigError, load_config
from src.bom_summary.config import CONFIG_ENV_VAR


def write(tmp_path, payload):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_defaults_without_a_file(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert load_config() == BomConfig()


def test_overrides(tmp_path):
    path = write(
        tmp_path,
        {"sheet_names": ["Parts"], "start_row": 11, "qty_col": 4, "tier1_parts": ["CF-1"]},
    )
    config = load_config(path)

    assert config.sheet_names == ("Parts",)
    assert config.start_row == 11
    assert config.qty_col == 4
    assert config.part_col == BomConfig().part_col
    assert config.tier1_parts == frozenset({"CF-1"})


def test_env_var_is_used(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, write(tmp_path, {"tier1_parts": ["X"]}))
    assert load_config().tier1_parts == frozenset({"X"})


@pytest.mark.parametrize(
    "payload",
    [
        {"colour": "red"},
        {"start_row": "2"},
        {"start_row": 0},
        {"qty_col": -1},
        {"part_col": True},
        {"tier1_parts": "CF-1"},
        {"sheet_names": [1, 2]},
        ["not", "an", "object"],
    ],
)
def test_invalid_config(tmp_path, payload):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, payload))


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.json"))

    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")
    with pytest.raises(ConfigError, match="Malformed"):
        load_config(str(bad))


def test_config_is_frozen():
    with pytest.raises(AttributeError):
        BomConfig().start_row = 5  # type: ignore[misc]
