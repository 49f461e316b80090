# mcdelta/logging/__init__.py
"""Logging helpers shared by every mcdelta module."""

from mcdelta.logging.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
