# mcdelta/config/__init__.py
"""
Configuration for mcdelta.

Key exports:
- McDeltaConfig: Validated top-level config
- load_config: Defaults + user override, validated
"""

from mcdelta.config.loader import deep_merge, load_config, load_config_dict, load_yaml
from mcdelta.config.schema import AnalysisConfig, ComparisonConfig, McDeltaConfig

__all__ = [
    "McDeltaConfig",
    "ComparisonConfig",
    "AnalysisConfig",
    "load_config",
    "load_config_dict",
    "load_yaml",
    "deep_merge",
]
