# mcdelta/comparison/differ.py
"""
Per-file content diffing.

Two paths, selected by the caller from the file sizes:
- diff_small: full diff. Text files get a unified diff with inline word
  highlighting; everything else gets zlib-compressed chunk records.
- diff_large: streaming compare that only locates the first differing byte.

Binary payload format (before zlib):
    repeated: >I offset | >I old_len | >I new_len | old_bytes | new_bytes
"""

from __future__ import annotations

import difflib
import re
import struct
import zlib
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from mcdelta.comparison.models import (
    BinaryModified,
    ChunkRecord,
    ContentModifiedAtOffset,
    DiffEntry,
    TextModified,
)
from mcdelta.config.schema import MIB
from mcdelta.exceptions import IOReadError
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import DIFF

logger = get_logger(__name__)

CHUNK_SIZE = MIB
LARGE_FILE_THRESHOLD = 10 * MIB
DEFAULT_TEXT_EXTENSIONS = frozenset({".java", ".txt", ".json", ".md"})

_RECORD_HEADER = struct.Struct(">III")
_CONTEXT_LINES = 3
_WORD_SPLIT = re.compile(r"(\s+)")

PathLike = Union[str, Path]


# =============================================================================
# Binary payload codec
# =============================================================================


def encode_chunk_records(records: Iterable[ChunkRecord]) -> bytes:
    """Serialize chunk records and zlib-compress the stream."""
    buf = bytearray()
    for record in records:
        buf += _RECORD_HEADER.pack(record.offset, record.old_length, record.new_length)
        buf += record.old_bytes
        buf += record.new_bytes
    return zlib.compress(bytes(buf))


def decode_binary_chunks(payload: bytes) -> List[ChunkRecord]:
    """
    Decode a BinaryModified payload back into chunk records.

    Raises:
        ValueError: If the payload is not valid zlib or a record is truncated
    """
    try:
        raw = zlib.decompress(payload)
    except zlib.error as e:
        raise ValueError(f"Invalid binary diff payload: {e}") from e

    records: List[ChunkRecord] = []
    pos = 0
    while pos < len(raw):
        if pos + _RECORD_HEADER.size > len(raw):
            raise ValueError(f"Truncated chunk header at byte {pos}")
        offset, old_len, new_len = _RECORD_HEADER.unpack_from(raw, pos)
        pos += _RECORD_HEADER.size

        end = pos + old_len + new_len
        if end > len(raw):
            raise ValueError(f"Truncated chunk body for offset {offset}")

        records.append(
            ChunkRecord(
                offset=offset,
                old_bytes=raw[pos : pos + old_len],
                new_bytes=raw[pos + old_len : end],
            )
        )
        pos = end

    return records


# =============================================================================
# Helpers
# =============================================================================


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise IOReadError(f"Cannot read {path}: {e}", path=path) from e


def _open(path: Path) -> BinaryIO:
    try:
        return path.open("rb")
    except OSError as e:
        raise IOReadError(f"Cannot open {path}: {e}", path=path) from e


def _read_block(f: BinaryIO, size: int, path: Path) -> bytes:
    try:
        return f.read(size)
    except OSError as e:
        raise IOReadError(f"Cannot read {path}: {e}", path=path) from e


def _iter_block_pairs(old: Path, new: Path, chunk_size: int) -> Iterator[Tuple[int, bytes, bytes]]:
    """Yield (offset, old_block, new_block) until both files are exhausted."""
    with _open(old) as f_old, _open(new) as f_new:
        offset = 0
        while True:
            a = _read_block(f_old, chunk_size, old)
            b = _read_block(f_new, chunk_size, new)
            if not a and not b:
                return
            yield offset, a, b
            offset += chunk_size


def _first_mismatch(a: bytes, b: bytes) -> int:
    """Index of the first differing byte, or len of the shorter block if one is a prefix."""
    n = min(len(a), len(b))
    va, vb = memoryview(a), memoryview(b)
    if va[:n] == vb[:n]:
        return n

    # Smallest i with a[:i+1] != b[:i+1]
    lo, hi = 0, n - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if va[: mid + 1] == vb[: mid + 1]:
            lo = mid + 1
        else:
            hi = mid
    return lo


def _format_range(start: int, length: int) -> str:
    beginning = start + 1
    if length == 0:
        beginning -= 1
    if length == 1:
        return f"{beginning}"
    return f"{beginning},{length}"


def highlight_words(old_line: str, new_line: str) -> str:
    """
    Render a replaced line with inline word markup.

    Examples:
        >>> highlight_words("int x = 1;", "int x = 2;")
        'int x = [-1;-]{+2;+}'
    """
    a = [t for t in _WORD_SPLIT.split(old_line) if t]
    b = [t for t in _WORD_SPLIT.split(new_line) if t]

    out: List[str] = []
    matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            out.append("".join(a[i1:i2]))
        elif tag == "delete":
            out.append(f"[-{''.join(a[i1:i2])}-]")
        elif tag == "insert":
            out.append(f"{{+{''.join(b[j1:j2])}+}}")
        else:
            out.append(f"[-{''.join(a[i1:i2])}-]{{+{''.join(b[j1:j2])}+}}")
    return "".join(out)


def unified_diff_with_highlights(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    fromfile: str = "old",
    tofile: str = "new",
    context: int = _CONTEXT_LINES,
) -> Tuple[str, int, int]:
    """
    Unified diff where each replaced line pair is followed by a `~` line
    showing the word-level change.

    Returns:
        (diff_text, lines_added, lines_removed). diff_text is empty when the
        sequences are equal.
    """
    out: List[str] = []
    added = removed = 0

    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    for group in matcher.get_grouped_opcodes(context):
        if not out:
            out.append(f"--- {fromfile}")
            out.append(f"+++ {tofile}")

        first, last = group[0], group[-1]
        old_range = _format_range(first[1], last[2] - first[1])
        new_range = _format_range(first[3], last[4] - first[3])
        out.append(f"@@ -{old_range} +{new_range} @@")

        for tag, i1, i2, j1, j2 in group:
            if tag == "equal":
                out.extend(f" {line}" for line in old_lines[i1:i2])
                continue
            if tag in ("replace", "delete"):
                out.extend(f"-{line}" for line in old_lines[i1:i2])
                removed += i2 - i1
            if tag in ("replace", "insert"):
                out.extend(f"+{line}" for line in new_lines[j1:j2])
                added += j2 - j1
            if tag == "replace":
                for old_line, new_line in zip(old_lines[i1:i2], new_lines[j1:j2]):
                    out.append(f"~{highlight_words(old_line, new_line)}")

    text = "\n".join(out) + "\n" if out else ""
    return text, added, removed


# =============================================================================
# ContentDiffer
# =============================================================================


class ContentDiffer:
    """
    Produces DiffEntry values for modified files.

    Stateless apart from its settings, so one instance can be shared by
    worker threads.
    """

    def __init__(
        self,
        chunk_size: int = CHUNK_SIZE,
        text_extensions: Optional[Iterable[str]] = None,
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.text_extensions = frozenset(
            e.lower() for e in (text_extensions if text_extensions is not None else DEFAULT_TEXT_EXTENSIONS)
        )

    def is_text(self, path: PathLike) -> bool:
        return Path(path).suffix.lower() in self.text_extensions

    def diff_small(self, old: PathLike, new: PathLike) -> Optional[DiffEntry]:
        """
        Full diff of two files small enough to hold in memory.

        Returns None if the files are byte-identical.

        Raises:
            IOReadError: If either file can't be read
        """
        old_path, new_path = Path(old), Path(new)

        if self.is_text(new_path):
            old_bytes = _read_bytes(old_path)
            new_bytes = _read_bytes(new_path)
            if old_bytes == new_bytes:
                return None

            diff_text, added, removed = unified_diff_with_highlights(
                old_bytes.decode("utf-8", errors="replace").splitlines(),
                new_bytes.decode("utf-8", errors="replace").splitlines(),
                fromfile=f"a/{old_path.name}",
                tofile=f"b/{new_path.name}",
            )
            if diff_text:
                logger.debug(f"{DIFF} Text diff {new_path.name}: +{added} -{removed}")
                return TextModified(diff_text=diff_text, lines_added=added, lines_removed=removed)
            # Only line endings or undecodable bytes changed
            logger.debug(f"{DIFF} No line-level change in {new_path.name}, using chunk diff")

        return self._diff_binary(old_path, new_path)

    def _diff_binary(self, old: Path, new: Path) -> Optional[BinaryModified]:
        records = [
            ChunkRecord(offset=offset, old_bytes=a, new_bytes=b)
            for offset, a, b in _iter_block_pairs(old, new, self.chunk_size)
            if a != b
        ]
        if not records:
            return None

        logger.debug(f"{DIFF} Binary diff {new.name}: {len(records)} differing chunks")
        return BinaryModified(encoded_chunks=encode_chunk_records(records))

    def diff_large(self, old: PathLike, new: PathLike) -> Optional[ContentModifiedAtOffset]:
        """
        Locate the first differing byte of two (large) files.

        A length mismatch counts as a difference at the end of the shorter
        file. Returns None if the files are identical.

        Raises:
            IOReadError: If either file can't be read
        """
        old_path, new_path = Path(old), Path(new)

        for offset, a, b in _iter_block_pairs(old_path, new_path, self.chunk_size):
            if a != b:
                position = offset + _first_mismatch(a, b)
                logger.debug(f"{DIFF} {new_path.name} first differs at byte {position}")
                return ContentModifiedAtOffset(offset=position)

        return None


__all__ = [
    "CHUNK_SIZE",
    "LARGE_FILE_THRESHOLD",
    "DEFAULT_TEXT_EXTENSIONS",
    "ContentDiffer",
    "encode_chunk_records",
    "decode_binary_chunks",
    "highlight_words",
    "unified_diff_with_highlights",
]
