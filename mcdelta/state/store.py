# mcdelta/state/store.py
"""
Store for persisted comparison states.

Manages {state_dir}/{old}__to__{new}.state.json.gz files.

Key responsibilities:
- Load/save states (gzip JSON, atomic writes)
- Discard stale, corrupt or mismatched states
- Keep an in-memory mirror of known states

Key non-responsibilities:
- NO hashing or diffing (that's ChangeSetComputer's job)
"""

from __future__ import annotations

import gzip
import json
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from mcdelta.exceptions import StateLoadError
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import STATE
from mcdelta.state.schema import SCHEMA_VERSION, STATE_FORMAT, ComparisonState

logger = get_logger(__name__)

_SUFFIX = ".state.json.gz"


class ComparisonStateStore:
    """
    Loads and saves ComparisonState per version pair.

    Loading never raises: anything unusable is logged and reported as None,
    which makes the caller fall back to a full comparison.

    Usage:
        store = ComparisonStateStore(McDeltaPaths.state_dir())
        state = store.load("1.20.1", "1.20.2")
        ...
        store.save("1.20.1", "1.20.2", fresh_state)
    """

    def __init__(self, state_dir: Path, max_age_hours: float = 24.0) -> None:
        self._dir = Path(state_dir)
        self.max_age_hours = max_age_hours
        self._states: Dict[Tuple[str, str], ComparisonState] = {}
        self._lock = threading.Lock()

    @property
    def state_dir(self) -> Path:
        return self._dir

    def state_path(self, old_version: str, new_version: str) -> Path:
        """Deterministic file path for a version pair."""
        return self._dir / f"{old_version}__to__{new_version}{_SUFFIX}"

    # =========================================================================
    # Load
    # =========================================================================

    def load(self, old_version: str, new_version: str) -> Optional[ComparisonState]:
        """
        Load the state for a pair, or None if there is no usable one.

        Stale states (older than max_age_hours) are discarded.
        """
        key = (old_version, new_version)

        with self._lock:
            state = self._states.get(key)

        if state is None:
            try:
                state = self._read(old_version, new_version)
            except StateLoadError as e:
                logger.warning(f"{STATE} Ignoring state for {old_version} -> {new_version}: {e}")
                return None

        if state.is_stale(self.max_age_hours):
            logger.info(
                f"{STATE} State for {old_version} -> {new_version} is stale "
                f"({state.age_hours():.1f}h old), discarding"
            )
            with self._lock:
                self._states.pop(key, None)
            return None

        with self._lock:
            self._states[key] = state
        logger.debug(f"{STATE} Loaded state for {old_version} -> {new_version}")
        return state

    def _read(self, old_version: str, new_version: str) -> ComparisonState:
        path = self.state_path(old_version, new_version)

        if not path.exists():
            raise StateLoadError(f"no state file at {path}")

        try:
            with gzip.open(path, "rt", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, EOFError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StateLoadError(f"unreadable state file {path}: {e}") from e

        if not isinstance(data, dict):
            raise StateLoadError(f"state root is not an object in {path}")
        if data.get("format") != STATE_FORMAT:
            raise StateLoadError(f"unknown format {data.get('format')!r} in {path}")
        if data.get("schema_version") != SCHEMA_VERSION:
            raise StateLoadError(
                f"schema version {data.get('schema_version')!r} != {SCHEMA_VERSION} in {path}"
            )

        try:
            state = ComparisonState.model_validate(data)
        except PydanticValidationError as e:
            raise StateLoadError(f"invalid state in {path}: {e}") from e

        if not state.matches(old_version, new_version):
            raise StateLoadError(
                f"state in {path} is for {state.old_version} -> {state.new_version}"
            )
        return state

    # =========================================================================
    # Save / Delete
    # =========================================================================

    def save(self, old_version: str, new_version: str, state: ComparisonState) -> Path:
        """
        Persist a state atomically and return its path.

        Raises:
            ValueError: If the state belongs to a different version pair
            OSError: If the file can't be written
        """
        if not state.matches(old_version, new_version):
            raise ValueError(
                f"State is for {state.old_version} -> {state.new_version}, "
                f"not {old_version} -> {new_version}"
            )

        path = self.state_path(old_version, new_version)
        path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = path.with_name(path.name + ".tmp")
        try:
            with gzip.open(temp_path, "wt", encoding="utf-8") as f:
                json.dump(state.model_dump(mode="json"), f)
            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

        with self._lock:
            self._states[(old_version, new_version)] = state

        logger.debug(f"{STATE} Saved state ({len(state.file_hashes)} files) to {path}")
        return path

    def delete(self, old_version: str, new_version: str) -> bool:
        """Remove the state for a pair. Returns True if a file was deleted."""
        with self._lock:
            self._states.pop((old_version, new_version), None)

        path = self.state_path(old_version, new_version)
        if path.exists():
            path.unlink()
            logger.debug(f"{STATE} Deleted {path}")
            return True
        return False


__all__ = ["ComparisonStateStore"]
