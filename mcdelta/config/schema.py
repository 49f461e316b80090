# mcdelta/config/schema.py
"""
Configuration schemas for mcdelta.

This module defines Pydantic models for:
- ComparisonConfig: Hashing, chunking and state staleness settings
- AnalysisConfig: Retry policy and pool size for the analysis pipeline
- McDeltaConfig: Top-level configuration
"""

from __future__ import annotations

import os
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIB = 1024 * 1024

# Binary diff records store offsets and lengths as unsigned 32-bit ints
MAX_RECORD_BYTES = 2**32 - 1


def _default_workers() -> int:
    return os.cpu_count() or 1


class ComparisonConfig(BaseModel):
    """
    Settings for the change-detection engine.

    Example YAML:
        comparison:
          chunk_size: 1048576
          large_file_threshold: 10485760
          state_max_age_hours: 24
          text_extensions: [.java, .json, .txt]
    """

    model_config = ConfigDict(extra="forbid")

    chunk_size: int = Field(
        default=MIB, gt=0, le=MAX_RECORD_BYTES, description="Streaming block size in bytes"
    )
    large_file_threshold: int = Field(
        default=10 * MIB,
        gt=0,
        le=MAX_RECORD_BYTES,
        description="Files at or above this size only get a first-mismatch offset",
    )
    state_max_age_hours: float = Field(
        default=24.0,
        gt=0,
        description="Persisted states older than this force a full comparison",
    )
    text_extensions: List[str] = Field(
        default_factory=lambda: [".java", ".txt", ".json", ".md"],
        description="Extensions diffed line-by-line; everything else is binary",
    )
    workers: int = Field(default_factory=_default_workers, gt=0)

    @field_validator("text_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v):
        """Lowercase extensions and make sure they start with a dot."""
        if v is None:
            return []
        normalized = []
        for ext in v:
            ext = str(ext).strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            normalized.append(ext)
        return normalized


class AnalysisConfig(BaseModel):
    """Retry policy for the mod impact analysis pipeline."""

    model_config = ConfigDict(extra="forbid")

    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=1.0, ge=0)
    workers: int = Field(default_factory=_default_workers, gt=0)


class McDeltaConfig(BaseModel):
    """Top-level mcdelta configuration."""

    model_config = ConfigDict(extra="forbid")

    log_level: str = Field(default="INFO")
    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)


__all__ = ["ComparisonConfig", "AnalysisConfig", "McDeltaConfig", "MIB", "MAX_RECORD_BYTES"]
