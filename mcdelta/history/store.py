# mcdelta/history/store.py
"""
Persistent change history.

Manages {changes_dir}/changes_history.json and zipped backups in
{backup_dir}/changes_backup_{YYYYmmdd_HHMMSS}.zip (newest 5 kept).
"""

from __future__ import annotations

import json
import threading
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from mcdelta.history.models import ChangeRecord, ChangeStatus, record_key
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import HISTORY

logger = get_logger(__name__)

HISTORY_FILENAME = "changes_history.json"
BACKUP_ENTRY = "changes.json"
BACKUP_PREFIX = "changes_backup_"
DEFAULT_KEEP_BACKUPS = 5


class ChangeHistoryStore:
    """
    Thread-safe store of ChangeRecords.

    The full history is loaded on construction and rewritten atomically on
    every change. A corrupt history file is logged and treated as empty.

    Usage:
        store = ChangeHistoryStore(McDeltaPaths.changes(), McDeltaPaths.changes_backup())
        store.save(record)
        store.list(status=ChangeStatus.FAILED)
        store.backup()
    """

    def __init__(
        self,
        changes_dir: Path,
        backup_dir: Optional[Path] = None,
        keep_backups: int = DEFAULT_KEEP_BACKUPS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._dir = Path(changes_dir)
        self._backup_dir = Path(backup_dir) if backup_dir else self._dir.parent / "changes_backup"
        self.keep_backups = keep_backups
        self._clock = clock
        self._lock = threading.RLock()
        self._records: Dict[str, ChangeRecord] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._dir / HISTORY_FILENAME

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug(f"{HISTORY} No change history at {self.path}")
            return

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            records = [ChangeRecord.model_validate(item) for item in data]
        except (OSError, json.JSONDecodeError, TypeError, PydanticValidationError) as e:
            logger.warning(f"{HISTORY} Failed to load change history, starting empty: {e}")
            return

        self._records = {r.key: r for r in records}
        logger.debug(f"{HISTORY} Loaded {len(self._records)} change records")

    def _serialize(self) -> str:
        return json.dumps(
            [r.model_dump(mode="json") for r in self._records.values()],
            indent=2,
        )

    def _persist(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(".tmp")
        try:
            temp_path.write_text(self._serialize(), encoding="utf-8")
            temp_path.replace(self.path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    # =========================================================================
    # CRUD
    # =========================================================================

    def save(self, record: ChangeRecord) -> ChangeRecord:
        """Insert or replace the record for its version pair."""
        with self._lock:
            self._records[record.key] = record
            self._persist()
        logger.debug(f"{HISTORY} Saved {record.key} ({record.status.value})")
        return record

    def get(self, source_version: str, target_version: str) -> Optional[ChangeRecord]:
        with self._lock:
            return self._records.get(record_key(source_version, target_version))

    def list(
        self,
        status: Optional[Union[ChangeStatus, str]] = None,
        version: Optional[str] = None,
    ) -> List[ChangeRecord]:
        """Records, newest first, optionally filtered by status or involved version."""
        wanted = ChangeStatus(status) if status is not None else None
        with self._lock:
            records = list(self._records.values())

        if wanted is not None:
            records = [r for r in records if r.status == wanted]
        if version is not None:
            records = [r for r in records if r.involves(version)]
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def delete(self, source_version: str, target_version: str) -> bool:
        """Remove a record. Returns False if there was none."""
        with self._lock:
            removed = self._records.pop(record_key(source_version, target_version), None)
            if removed is None:
                return False
            self._persist()
        logger.debug(f"{HISTORY} Deleted {removed.key}")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    # =========================================================================
    # Backups
    # =========================================================================

    def backup(self) -> Path:
        """
        Zip the current history and prune old backups.

        Returns:
            Path of the new backup archive
        """
        stamp = self._clock().strftime("%Y%m%d_%H%M%S")
        self._backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path = self._backup_dir / f"{BACKUP_PREFIX}{stamp}.zip"

        with self._lock:
            payload = self._serialize()

        with zipfile.ZipFile(backup_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(BACKUP_ENTRY, payload)

        logger.info(f"{HISTORY} Backed up change history to {backup_path}")
        self._prune_backups()
        return backup_path

    def backups(self) -> List[Path]:
        """Existing backups, newest first."""
        if not self._backup_dir.exists():
            return []
        return sorted(self._backup_dir.glob(f"{BACKUP_PREFIX}*.zip"), key=lambda p: p.name, reverse=True)

    def _prune_backups(self) -> None:
        for old in self.backups()[self.keep_backups :]:
            try:
                old.unlink()
                logger.debug(f"{HISTORY} Removed old backup {old.name}")
            except OSError as e:
                logger.error(f"{HISTORY} Failed to delete old backup {old}: {e}")


__all__ = ["ChangeHistoryStore", "HISTORY_FILENAME", "BACKUP_ENTRY"]
