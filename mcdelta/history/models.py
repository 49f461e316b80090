# mcdelta/history/models.py
"""
Change history schema.

One ChangeRecord per ordered version pair; a new comparison of the same
pair replaces the previous record.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChangeStatus(str, Enum):
    """Lifecycle of a recorded comparison."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


def record_key(source_version: str, target_version: str) -> str:
    return f"{source_version}__to__{target_version}"


class ChangeRecord(BaseModel):
    """Outcome of one version comparison."""

    model_config = ConfigDict(extra="forbid")

    source_version: str
    target_version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: ChangeStatus = Field(default=ChangeStatus.PENDING)
    mode: Optional[str] = Field(default=None, description="'full' or 'incremental'")

    added_files: List[str] = Field(default_factory=list)
    modified_files: List[str] = Field(default_factory=list)
    deleted_files: List[str] = Field(default_factory=list)
    statistics: Dict[str, Any] = Field(default_factory=dict)

    diff_report_path: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def key(self) -> str:
        return record_key(self.source_version, self.target_version)

    @property
    def total_changes(self) -> int:
        return len(self.added_files) + len(self.modified_files) + len(self.deleted_files)

    def involves(self, version: str) -> bool:
        return version in (self.source_version, self.target_version)

    def mark_complete(self) -> None:
        self.status = ChangeStatus.SUCCESS
        self.error_message = None

    def mark_failed(self, error: str) -> None:
        self.status = ChangeStatus.FAILED
        self.error_message = error


__all__ = ["ChangeStatus", "ChangeRecord", "record_key"]
