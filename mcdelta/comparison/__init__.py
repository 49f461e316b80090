# mcdelta/comparison/__init__.py
"""
Version change detection.

Key exports:
- FileFingerprintCache: mtime-invalidated SHA-256 cache
- ChangeSetComputer: full / incremental tree comparison
- ContentDiffer: per-file text, binary and large-file diffs
- ComparisonResult + DiffEntry variants
- ChangeStatistics, write_diff_report
"""

from mcdelta.comparison.computer import ChangeSetComputer
from mcdelta.comparison.differ import (
    CHUNK_SIZE,
    LARGE_FILE_THRESHOLD,
    ContentDiffer,
    decode_binary_chunks,
    encode_chunk_records,
)
from mcdelta.comparison.hashing import FileFingerprint, FileFingerprintCache, compute_content_hash
from mcdelta.comparison.models import (
    BinaryModified,
    ChunkRecord,
    ComparisonResult,
    ContentModifiedAtOffset,
    DiffEntry,
    TextModified,
)
from mcdelta.comparison.report import ChangeStatistics, write_diff_report
from mcdelta.comparison.scanner import ScannedTree, scan_tree

__all__ = [
    "ChangeSetComputer",
    "ContentDiffer",
    "FileFingerprintCache",
    "FileFingerprint",
    "compute_content_hash",
    "ComparisonResult",
    "DiffEntry",
    "TextModified",
    "BinaryModified",
    "ContentModifiedAtOffset",
    "ChunkRecord",
    "decode_binary_chunks",
    "encode_chunk_records",
    "ChangeStatistics",
    "write_diff_report",
    "ScannedTree",
    "scan_tree",
    "CHUNK_SIZE",
    "LARGE_FILE_THRESHOLD",
]
