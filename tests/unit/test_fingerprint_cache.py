# tests/unit/test_fingerprint_cache.py
"""
Tests for mcdelta.comparison.hashing.
"""

import hashlib
import threading

import pytest

from mcdelta.comparison.hashing import (
    FileFingerprintCache,
    compute_bytes_hash,
    compute_content_hash,
)
from mcdelta.exceptions import IOReadError
from tests.conftest import touch_later


class TestComputeContentHash:
    """Tests for compute_content_hash."""

    def test_hash_format(self, tmp_path):
        """Hash is 'sha256:' followed by 64 hex chars."""
        f = tmp_path / "a.txt"
        f.write_text("hello")

        digest = compute_content_hash(f)

        assert digest.startswith("sha256:")
        assert len(digest) == len("sha256:") + 64

    def test_matches_hashlib(self, tmp_path):
        """Digest equals hashlib's SHA-256 of the bytes."""
        data = b"\x00\x01binary" * 10_000
        f = tmp_path / "b.bin"
        f.write_bytes(data)

        assert compute_content_hash(f) == f"sha256:{hashlib.sha256(data).hexdigest()}"
        assert compute_content_hash(f) == compute_bytes_hash(data)

    def test_same_content_same_hash(self, tmp_path):
        """Identical content in different paths hashes the same."""
        (tmp_path / "x.txt").write_text("same")
        (tmp_path / "y.txt").write_text("same")

        assert compute_content_hash(tmp_path / "x.txt") == compute_content_hash(tmp_path / "y.txt")

    def test_missing_file_raises(self, tmp_path):
        """Missing file raises IOReadError with the path."""
        with pytest.raises(IOReadError) as exc_info:
            compute_content_hash(tmp_path / "nope.txt")
        assert "nope.txt" in exc_info.value.path

    def test_directory_raises(self, tmp_path):
        """Directories are not hashable."""
        with pytest.raises(IOReadError):
            compute_content_hash(tmp_path)


class TestFileFingerprintCache:
    """Tests for FileFingerprintCache."""

    def test_hash_is_stable(self, tmp_path):
        """Unchanged file returns the same digest and hits the cache."""
        f = tmp_path / "a.txt"
        f.write_text("content")
        cache = FileFingerprintCache()

        first = cache.hash(f)
        second = cache.hash(f)

        assert first == second
        assert cache.misses == 1
        assert cache.hits == 1
        assert len(cache) == 1

    def test_mtime_change_invalidates(self, tmp_path):
        """A newer mtime forces a recompute with the new content."""
        f = tmp_path / "a.txt"
        f.write_text("before")
        cache = FileFingerprintCache()
        before = cache.hash(f)

        f.write_text("after!")
        touch_later(f)
        after = cache.hash(f)

        assert before != after
        assert after == compute_content_hash(f)
        assert cache.misses == 2

    def test_fingerprint_fields(self, tmp_path):
        """Fingerprint carries absolute path, digest and mtime."""
        f = tmp_path / "a.txt"
        f.write_text("x")
        cache = FileFingerprintCache()

        fp = cache.fingerprint(f)

        assert fp.path == str(f.resolve())
        assert fp.digest == compute_content_hash(f)
        assert fp.mtime_ns == f.stat().st_mtime_ns
        assert fp.last_modified_epoch_ms == f.stat().st_mtime_ns // 1_000_000

    def test_missing_file_raises(self, tmp_path):
        """Unreadable path raises IOReadError, nothing is cached."""
        cache = FileFingerprintCache()

        with pytest.raises(IOReadError):
            cache.hash(tmp_path / "missing.bin")
        assert len(cache) == 0

    def test_invalidate_and_clear(self, tmp_path):
        """invalidate drops one entry, clear drops all and resets counters."""
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"
        a.write_text("a")
        b.write_text("b")
        cache = FileFingerprintCache()
        cache.hash(a)
        cache.hash(b)

        cache.invalidate(a)
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0
        assert cache.hits == 0
        assert cache.misses == 0

    def test_concurrent_callers(self, tmp_path):
        """Many threads hashing the same files agree on the digests."""
        files = []
        for i in range(5):
            f = tmp_path / f"f{i}.txt"
            f.write_text(f"content {i}" * 100)
            files.append(f)
        cache = FileFingerprintCache()
        results = []
        lock = threading.Lock()

        def worker():
            digests = [cache.hash(f) for f in files]
            with lock:
                results.append(digests)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        expected = [compute_content_hash(f) for f in files]
        assert all(r == expected for r in results)
        assert len(cache) == 5
