# mcdelta/state/__init__.py
"""Persisted comparison state (schema + store)."""

from mcdelta.state.schema import SCHEMA_VERSION, STATE_FORMAT, ComparisonState
from mcdelta.state.store import ComparisonStateStore

__all__ = ["ComparisonState", "ComparisonStateStore", "SCHEMA_VERSION", "STATE_FORMAT"]
