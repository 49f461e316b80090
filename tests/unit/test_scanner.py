# tests/unit/test_scanner.py
"""
Tests for mcdelta.comparison.scanner.
"""

import pytest

from mcdelta.comparison.scanner import scan_tree, validate_root
from mcdelta.exceptions import ValidationError


class TestScanTree:
    """Tests for scan_tree."""

    def test_relative_posix_paths(self, make_tree):
        """Nested files are keyed by relative POSIX paths."""
        root = make_tree(
            "tree",
            {
                "a.txt": "a",
                "net/minecraft/Foo.java": "class Foo {}",
                "assets/lang/en_us.json": "{}",
            },
        )

        tree = scan_tree(root)

        assert tree.paths == {"a.txt", "net/minecraft/Foo.java", "assets/lang/en_us.json"}
        assert tree.files["net/minecraft/Foo.java"] == root.resolve() / "net" / "minecraft" / "Foo.java"
        assert len(tree) == 3

    def test_hidden_files_included(self, make_tree):
        """Dotfiles are part of a version tree."""
        root = make_tree("tree", {".mcassetsroot": "", "sub/.hidden": "x"})

        assert scan_tree(root).paths == {".mcassetsroot", "sub/.hidden"}

    def test_empty_directory(self, tmp_path):
        """Empty root yields no files; empty subdirectories are ignored."""
        root = tmp_path / "empty"
        (root / "sub").mkdir(parents=True)

        assert scan_tree(root).paths == set()

    def test_missing_root_raises(self, tmp_path):
        """Missing root is a ValidationError."""
        with pytest.raises(ValidationError):
            scan_tree(tmp_path / "missing")

    def test_file_root_raises(self, tmp_path):
        """A file is not a valid root."""
        f = tmp_path / "file.txt"
        f.write_text("x")

        with pytest.raises(ValidationError):
            validate_root(f)
