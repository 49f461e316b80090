# mcdelta/state/schema.py
"""
Persisted comparison state.

One state per ordered (old_version, new_version) pair. It records the
content hashes of the new tree at the time of the last comparison, so the
next comparison of the same pair can skip unchanged files.

On disk the state is wrapped in an envelope:
    {"format": "mcdelta.comparison_state", "schema_version": 1, ...fields}
and gzip-compressed.
"""

from __future__ import annotations

import time
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

STATE_FORMAT = "mcdelta.comparison_state"
SCHEMA_VERSION = 1


def now_ms() -> int:
    return int(time.time() * 1000)


class ComparisonState(BaseModel):
    """
    Snapshot of a finished comparison.

    file_hashes maps relative POSIX paths of the new tree to their
    "sha256:<hex>" digest.
    """

    model_config = ConfigDict(extra="forbid")

    format: str = Field(default=STATE_FORMAT)
    schema_version: int = Field(default=SCHEMA_VERSION)
    old_version: str
    new_version: str
    file_hashes: Dict[str, str] = Field(default_factory=dict)
    timestamp_ms: int = Field(default_factory=now_ms)

    def age_hours(self, now: Optional[int] = None) -> float:
        """Age in hours relative to `now` (epoch ms, defaults to the current time)."""
        current = now if now is not None else now_ms()
        return max(0, current - self.timestamp_ms) / 3_600_000

    def is_stale(self, max_age_hours: float, now: Optional[int] = None) -> bool:
        return self.age_hours(now) > max_age_hours

    def matches(self, old_version: str, new_version: str) -> bool:
        return self.old_version == old_version and self.new_version == new_version


__all__ = ["ComparisonState", "STATE_FORMAT", "SCHEMA_VERSION", "now_ms"]
