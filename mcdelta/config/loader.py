# mcdelta/config/loader.py
"""
Layered configuration loading for mcdelta.

Merge strategy:
    1. Package defaults (mcdelta/config/default.yaml) - always loaded
    2. User config ({workspace}/config.yaml, or an explicit path) - overrides defaults

The merged dict is validated against McDeltaConfig, so every value is
guaranteed to exist afterwards.

Usage:
    from mcdelta.config.loader import load_config

    config = load_config()
    threshold = config.comparison.large_file_threshold
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from mcdelta.config.schema import McDeltaConfig
from mcdelta.core.paths import McDeltaPaths
from mcdelta.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from mcdelta.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "default.yaml"


# =============================================================================
# Deep Merge
# =============================================================================


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Values from `override` take precedence. Nested dicts are merged
    recursively; lists are replaced entirely.

    Examples:
        >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}})
        {'a': 1, 'b': {'c': 10, 'd': 3}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


# =============================================================================
# Loading Functions
# =============================================================================


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML file and return it as a dictionary.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid or the root is not a mapping
    """
    p = Path(path)

    if not p.exists():
        raise ConfigNotFoundError("Config file not found", path=p)

    if p.is_dir():
        raise ConfigError("Config path is a directory, not a file", path=p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=p) from e
    except OSError as e:
        raise ConfigParseError(f"Failed to read config: {e}", path=p) from e

    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping (dict)", path=p)

    logger.debug(f"Loaded config from {p}")
    return data


def load_config_dict(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load defaults merged with the user override, without validation.

    An explicit `path` must exist. Without one, the workspace config is
    used when present.
    """
    merged = load_yaml(DEFAULTS_PATH)

    if path is not None:
        merged = deep_merge(merged, load_yaml(path))
    else:
        user_path = McDeltaPaths.config()
        if user_path.exists():
            merged = deep_merge(merged, load_yaml(user_path))
        else:
            logger.debug(f"No user config at {user_path}, using defaults")

    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> McDeltaConfig:
    """
    Load and validate the effective configuration.

    Raises:
        ConfigNotFoundError: If an explicit path doesn't exist
        ConfigParseError: If YAML is invalid
        ConfigValidationError: If config doesn't match the schema
    """
    data = load_config_dict(path)
    try:
        return McDeltaConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigValidationError(
            f"Invalid configuration: {e}", path=Path(path) if path else None
        ) from e


__all__ = [
    "DEFAULTS_PATH",
    "deep_merge",
    "load_yaml",
    "load_config_dict",
    "load_config",
]
