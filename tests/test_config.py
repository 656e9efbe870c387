"""
Unit tests for config.py
"""

import pytest
from dscript_engine.config import ConfigError, DScriptConfig, load_config


def test_defaults():
    config = DScriptConfig()
    assert config.rounds == 3
    assert config.seed is None
    assert config.metrics_file is None
    assert config.realtime is False
    assert config.color is True


def test_load_config(tmp_path):
    path = tmp_path / "dscript.yaml"
    path.write_text("rounds: 5\nseed: 42\nmetrics_file: table.yaml\ncolor: false\n")
    config = load_config(str(path))
    assert config == DScriptConfig(rounds=5, seed=42, metrics_file="table.yaml", color=False)


def test_load_empty_config(tmp_path):
    path = tmp_path / "dscript.yaml"
    path.write_text("")
    assert load_config(str(path)) == DScriptConfig()


@pytest.mark.parametrize("content,match", [
    ("rounds: 0\n", "between 1 and 5"),
    ("rounds: three\n", "rounds must be"),
    ("rounds: true\n", "whole number"),
    ("color: maybe\n", "color must be of type bool"),
    ("epochs: 3\n", "Unknown config key"),
    ("- rounds\n", "must contain a mapping"),
    ("rounds: [3\n", "Invalid YAML syntax"),
])
def test_bad_config(tmp_path, content, match):
    path = tmp_path / "dscript.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError, match=match):
        load_config(str(path))


def test_missing_config(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "dscript.yaml"))
