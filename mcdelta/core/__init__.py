# mcdelta/core/__init__.py
"""Paths and version identifier helpers."""

from mcdelta.core.paths import McDeltaPaths
from mcdelta.core.versions import clean_version, validate_version

__all__ = ["McDeltaPaths", "clean_version", "validate_version"]
