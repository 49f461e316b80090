# mcdelta/core/versions.py
"""
Version identifier helpers.

Version ids double as directory and file names (versions/<id>,
state/<old>__to__<new>.state.json.gz), so they are validated before any
comparison work starts.
"""

from __future__ import annotations

import re
from typing import Optional

from mcdelta.exceptions import ValidationError
from mcdelta.logging.logger import get_logger

logger = get_logger(__name__)

_VERSION_NUMBER = re.compile(r"(\d+\.\d+(?:\.\d+)?)")
_VERSION_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._+-]*$")
_OPERATORS = re.compile(r"[><=~^]")


def clean_version(raw: str) -> Optional[str]:
    """
    Extract the most detailed version number from a dependency range.

    Operators are stripped, and of all dotted numbers found the one with
    the most components wins (first one on ties).

    Examples:
        >>> clean_version(">=1.20.1 <1.21")
        '1.20.1'
        >>> clean_version("~1.19")
        '1.19'
        >>> clean_version("*") is None
        True
    """
    cleaned = _OPERATORS.sub("", raw or "").strip()

    best: Optional[str] = None
    for match in _VERSION_NUMBER.finditer(cleaned):
        candidate = match.group(1)
        if best is None or candidate.count(".") > best.count("."):
            best = candidate

    logger.debug(f"Original version: '{raw}' -> clean version: '{best}'")
    return best


def validate_version(raw: str) -> str:
    """
    Validate a version identifier and return it stripped.

    Raises:
        ValidationError: If the id is empty or contains path separators or
            other characters unsafe for file names.
    """
    if raw is None:
        raise ValidationError("Version identifier is required")

    version = str(raw).strip()
    if not version:
        raise ValidationError("Version identifier is empty")

    if not _VERSION_ID.match(version) or ".." in version:
        raise ValidationError(f"Malformed version identifier: {raw!r}")

    return version


__all__ = ["clean_version", "validate_version"]
