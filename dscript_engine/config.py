"""
Run configuration for the D-Script tools, read from a YAML file.

Example dscript.yaml:

    rounds: 3
    seed: 42
    metrics_file: my_metrics.yaml
    realtime: false
    color: true
"""

import logging
from dataclasses import dataclass, fields
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

MIN_ROUNDS = 1
MAX_ROUNDS = 5


class ConfigError(Exception):
    pass


@dataclass
class DScriptConfig:
    rounds: int = 3
    seed: Optional[int] = None
    metrics_file: Optional[str] = None
    realtime: bool = False
    color: bool = True

    def __post_init__(self):
        check_rounds(self.rounds)


def check_rounds(rounds) -> int:
    if isinstance(rounds, bool) or not isinstance(rounds, int):
        raise ConfigError(f"rounds must be a whole number, got: {rounds!r}")
    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        raise ConfigError(f"rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got: {rounds}")
    return rounds


_EXPECTED_TYPES = {
    'rounds': int,
    'seed': int,
    'metrics_file': str,
    'realtime': bool,
    'color': bool,
}


def load_config(path: str) -> DScriptConfig:
    """
    Load a DScriptConfig from a YAML file.
    Raises ConfigError when the file cannot be read or holds bad values.
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except PermissionError:
        raise ConfigError(f"Cannot read config file {path}\nCheck file permissions.")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}\nDetails: {e}")

    if data is None:
        return DScriptConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping of settings")

    known = {f.name for f in fields(DScriptConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {path}: {', '.join(map(str, unknown))}")

    for key, value in data.items():
        expected = _EXPECTED_TYPES[key]
        if value is None and key in ('seed', 'metrics_file'):
            continue
        if expected is int and isinstance(value, bool):
            raise ConfigError(f"{key} must be a whole number, got: {value!r}")
        if not isinstance(value, expected):
            raise ConfigError(f"{key} must be of type {expected.__name__}, got: {value!r}")

    logger.debug("Loaded config from %s: %s", path, data)
    return DScriptConfig(**data)
