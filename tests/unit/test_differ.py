# tests/unit/test_differ.py
"""
Tests for mcdelta.comparison.differ.
"""

import struct
import zlib

import pytest

from mcdelta.comparison.differ import (
    ContentDiffer,
    decode_binary_chunks,
    encode_chunk_records,
    highlight_words,
    unified_diff_with_highlights,
)
from mcdelta.comparison.models import (
    BinaryModified,
    ChunkRecord,
    ContentModifiedAtOffset,
    TextModified,
)
from mcdelta.exceptions import IOReadError


@pytest.fixture
def pair(tmp_path):
    """Write an (old, new) file pair with the given name."""

    def _pair(name, old, new):
        old_path = tmp_path / "old" / name
        new_path = tmp_path / "new" / name
        old_path.parent.mkdir(exist_ok=True)
        new_path.parent.mkdir(exist_ok=True)
        for path, data in ((old_path, old), (new_path, new)):
            if isinstance(data, bytes):
                path.write_bytes(data)
            else:
                path.write_text(data, encoding="utf-8")
        return old_path, new_path

    return _pair


class TestHighlighting:
    """Tests for word-level highlighting and the unified diff."""

    def test_highlight_replaced_word(self):
        assert highlight_words("int x = 1;", "int x = 2;") == "int x = [-1;-]{+2;+}"

    def test_highlight_insert_and_delete(self):
        assert highlight_words("a b", "a b c") == "a b{+ c+}"
        assert highlight_words("a b c", "a c") == "a [-b -]c"

    def test_unified_diff_counts(self):
        """Added / removed line counts match the +/- lines."""
        old = ["one", "two", "three"]
        new = ["one", "TWO", "three", "four"]

        text, added, removed = unified_diff_with_highlights(old, new, "a/f", "b/f")

        assert added == 2
        assert removed == 1
        lines = text.splitlines()
        assert lines[0] == "--- a/f"
        assert lines[1] == "+++ b/f"
        assert lines[2].startswith("@@ -1,3 +1,4 @@")
        assert "-two" in lines
        assert "+TWO" in lines
        assert "+four" in lines
        assert "~[-two-]{+TWO+}" in lines

    def test_equal_sequences_produce_nothing(self):
        assert unified_diff_with_highlights(["a"], ["a"]) == ("", 0, 0)


class TestChunkCodec:
    """Tests for the binary payload format."""

    def test_decode_inverts_encode(self):
        records = [
            ChunkRecord(offset=0, old_bytes=b"abc", new_bytes=b"abd"),
            ChunkRecord(offset=1024, old_bytes=b"", new_bytes=b"tail"),
        ]

        assert decode_binary_chunks(encode_chunk_records(records)) == records

    def test_wire_layout(self):
        """Payload is zlib(>III header + old + new)."""
        payload = encode_chunk_records([ChunkRecord(offset=7, old_bytes=b"x", new_bytes=b"yz")])

        raw = zlib.decompress(payload)
        assert raw == struct.pack(">III", 7, 1, 2) + b"x" + b"yz"

    def test_truncated_payload_raises(self):
        raw = struct.pack(">III", 0, 10, 10) + b"short"
        with pytest.raises(ValueError):
            decode_binary_chunks(zlib.compress(raw))

    def test_not_zlib_raises(self):
        with pytest.raises(ValueError):
            decode_binary_chunks(b"nope")


class TestDiffSmall:
    """Tests for ContentDiffer.diff_small."""

    def test_identical_text_returns_none(self, pair):
        old, new = pair("a.txt", "same\n", "same\n")

        assert ContentDiffer().diff_small(old, new) is None

    def test_identical_binary_returns_none(self, pair):
        old, new = pair("b.bin", b"\x00" * 100, b"\x00" * 100)

        assert ContentDiffer().diff_small(old, new) is None

    def test_text_diff(self, pair):
        """Text extension produces a TextModified with counts."""
        old, new = pair("Foo.java", "class Foo {\n  int x = 1;\n}\n", "class Foo {\n  int x = 2;\n}\n")

        entry = ContentDiffer().diff_small(old, new)

        assert isinstance(entry, TextModified)
        assert entry.kind == "text"
        assert entry.lines_added == 1
        assert entry.lines_removed == 1
        assert "-  int x = 1;" in entry.diff_text
        assert "+  int x = 2;" in entry.diff_text
        assert "[-1;-]{+2;+}" in entry.diff_text

    def test_extension_match_is_case_insensitive(self, pair):
        old, new = pair("README.TXT", "a\n", "b\n")

        assert isinstance(ContentDiffer().diff_small(old, new), TextModified)

    def test_line_ending_only_change_falls_back_to_chunks(self, pair):
        """Changes invisible at line level still produce a diff."""
        old, new = pair("a.txt", b"a\nb\n", b"a\r\nb\r\n")

        entry = ContentDiffer().diff_small(old, new)

        assert isinstance(entry, BinaryModified)

    def test_binary_diff_records(self, pair):
        """Only differing chunks are recorded, with their offsets."""
        old_data = b"A" * 10 + b"B" * 10 + b"C" * 10
        new_data = b"A" * 10 + b"X" * 10 + b"C" * 10 + b"DD"
        old, new = pair("b.bin", old_data, new_data)

        entry = ContentDiffer(chunk_size=10).diff_small(old, new)

        assert isinstance(entry, BinaryModified)
        assert entry.kind == "binary"
        records = decode_binary_chunks(entry.encoded_chunks)
        assert records == [
            ChunkRecord(offset=10, old_bytes=b"B" * 10, new_bytes=b"X" * 10),
            ChunkRecord(offset=30, old_bytes=b"", new_bytes=b"DD"),
        ]

    def test_unreadable_file_raises(self, pair, tmp_path):
        old, _ = pair("a.bin", b"x", b"y")

        with pytest.raises(IOReadError):
            ContentDiffer().diff_small(old, tmp_path / "missing.bin")

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            ContentDiffer(chunk_size=0)


class TestDiffLarge:
    """Tests for ContentDiffer.diff_large."""

    def test_identical_returns_none(self, pair):
        old, new = pair("big.bin", b"z" * 5000, b"z" * 5000)

        assert ContentDiffer(chunk_size=1024).diff_large(old, new) is None

    def test_exact_first_mismatch_offset(self, pair):
        """Offset is exact, also across chunk boundaries."""
        old_data = bytearray(b"\x00" * 5000)
        new_data = bytearray(old_data)
        new_data[3001] = 0xFF
        new_data[4000] = 0xFF
        old, new = pair("big.bin", bytes(old_data), bytes(new_data))

        entry = ContentDiffer(chunk_size=1024).diff_large(old, new)

        assert entry == ContentModifiedAtOffset(offset=3001)
        assert entry.kind == "offset"

    def test_length_mismatch(self, pair):
        """A longer new file differs where the old one ends."""
        old, new = pair("big.bin", b"q" * 2048, b"q" * 2049)

        assert ContentDiffer(chunk_size=1024).diff_large(old, new).offset == 2048

    def test_shorter_new_file(self, pair):
        old, new = pair("big.bin", b"q" * 1500, b"q" * 100)

        assert ContentDiffer(chunk_size=1024).diff_large(old, new).offset == 100

    def test_first_byte_differs(self, pair):
        old, new = pair("big.bin", b"a" + b"q" * 10, b"b" + b"q" * 10)

        assert ContentDiffer(chunk_size=4).diff_large(old, new).offset == 0
