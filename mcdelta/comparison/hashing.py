# mcdelta/comparison/hashing.py
"""
Content hashing for version comparison.

Provides SHA-256 based content identity for files, memoized per absolute
path and invalidated by modification time.

Design:
- Content hash is computed from raw file bytes, streamed in blocks
- A cached fingerprint is valid only while the file's mtime is unchanged
- Same content in different paths = same hash
"""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Union

from mcdelta.exceptions import IOReadError
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import FINGERPRINT

logger = get_logger(__name__)

HASH_PREFIX = "sha256:"
_READ_BLOCK = 65536  # 64KB


def compute_content_hash(path: Union[str, Path]) -> str:
    """
    Compute the SHA-256 hash of a file's contents.

    Returns:
        SHA-256 hash as hex string with "sha256:" prefix

    Raises:
        IOReadError: If the path is missing, is a directory, or can't be read

    Examples:
        >>> compute_content_hash("empty.txt")
        'sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    p = Path(path)

    if p.is_dir():
        raise IOReadError(f"Path is a directory: {path}", path=p)

    hasher = hashlib.sha256()
    try:
        with p.open("rb") as f:
            while block := f.read(_READ_BLOCK):
                hasher.update(block)
    except OSError as e:
        raise IOReadError(f"Cannot read {path}: {e}", path=p) from e

    return f"{HASH_PREFIX}{hasher.hexdigest()}"


def compute_bytes_hash(data: bytes) -> str:
    """Compute the SHA-256 hash of in-memory bytes, same format as files."""
    return f"{HASH_PREFIX}{hashlib.sha256(data).hexdigest()}"


@dataclass(frozen=True)
class FileFingerprint:
    """Content hash of one file, tied to the mtime it was computed at."""

    path: str  # Absolute path
    digest: str  # "sha256:<hex>"
    mtime_ns: int  # Modification time the digest is valid for

    @property
    def last_modified_epoch_ms(self) -> int:
        return self.mtime_ns // 1_000_000


class FileFingerprintCache:
    """
    Memoizes file hashes, invalidated by modification time.

    Entries are keyed by absolute path and never evicted; the data set is
    bounded by the version trees that get compared. Safe to share between
    worker threads: the map is guarded by a lock and hashing runs outside it.

    Usage:
        cache = FileFingerprintCache()
        digest = cache.hash("/versions/1.20.1/net/minecraft/Foo.java")
    """

    def __init__(self) -> None:
        self._entries: Dict[str, FileFingerprint] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def hash(self, path: Union[str, Path]) -> str:
        """
        Get the content hash for a file, recomputing it if the file changed.

        Raises:
            IOReadError: If the file can't be stat'ed or read
        """
        return self.fingerprint(path).digest

    def fingerprint(self, path: Union[str, Path]) -> FileFingerprint:
        """Get the full fingerprint (path, digest, mtime) for a file."""
        p = Path(path)
        try:
            key = str(p.resolve())
            stat = p.stat()
        except OSError as e:
            raise IOReadError(f"Cannot stat {path}: {e}", path=p) from e

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None and cached.mtime_ns == stat.st_mtime_ns:
                self.hits += 1
                return cached

        digest = compute_content_hash(p)
        entry = FileFingerprint(path=key, digest=digest, mtime_ns=stat.st_mtime_ns)

        with self._lock:
            self._entries[key] = entry
            self.misses += 1

        logger.debug(f"{FINGERPRINT} Hashed {key}")
        return entry

    def invalidate(self, path: Union[str, Path]) -> None:
        """Drop the cached entry for a path, if any."""
        with self._lock:
            self._entries.pop(str(Path(path).resolve()), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = [
    "HASH_PREFIX",
    "compute_content_hash",
    "compute_bytes_hash",
    "FileFingerprint",
    "FileFingerprintCache",
]
