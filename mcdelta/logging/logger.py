# mcdelta/logging/logger.py
"""
Unified logging setup for mcdelta.

All modules use:
    from mcdelta.logging.logger import get_logger
    logger = get_logger(__name__)

Configuration happens once, at the CLI entrypoint (or by the embedding
application) via configure_logging().
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO, Union

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO = sys.stdout,
) -> None:
    """
    Configure the root logging handler.

    Safe to call multiple times: a handler is only added the first time.
    Level may be an int or a level name ("DEBUG", "info", ...).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt, datefmt=DEFAULT_DATEFMT))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Do NOT configure logging here; configuration happens in configure_logging().
    """
    return logging.getLogger(name)
