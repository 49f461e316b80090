# mcdelta/exceptions.py
"""
All exceptions for mcdelta.

Hierarchy:
    McDeltaError
    ├── ValidationError - Bad version ids / missing roots, raised before any work
    ├── IOReadError - A single file could not be read (isolated per file)
    ├── ComparisonError - Traversal failed, the whole comparison is aborted
    ├── StateLoadError - Persisted state unusable (always swallowed by the store)
    ├── PipelineError - An analysis stage failed (triggers retry)
    └── ConfigError - Configuration failures
        ├── ConfigNotFoundError
        ├── ConfigParseError
        └── ConfigValidationError
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class McDeltaError(Exception):
    """Base class for every mcdelta error."""

    pass


# =============================================================================
# Comparison Errors
# =============================================================================


class ValidationError(McDeltaError):
    """Input rejected before any comparison work started."""

    pass


class IOReadError(McDeltaError):
    """A file could not be read while hashing or diffing."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


class ComparisonError(McDeltaError):
    """Unexpected failure while walking the version trees."""

    pass


class StateLoadError(McDeltaError):
    """Persisted comparison state is missing, corrupt or incompatible."""

    pass


# =============================================================================
# Pipeline Errors
# =============================================================================


class PipelineError(McDeltaError):
    """An analysis pipeline stage failed."""

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage
        if stage:
            message = f"[{stage}] {message}"
        super().__init__(message)


# =============================================================================
# Config Errors
# =============================================================================


class ConfigError(McDeltaError):
    """Base error for configuration issues."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when config doesn't match schema."""

    pass


__all__ = [
    "McDeltaError",
    "ValidationError",
    "IOReadError",
    "ComparisonError",
    "StateLoadError",
    "PipelineError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
]
