# mcdelta/comparison/computer.py
"""
Change set computation between two version trees.

Two algorithms produce the same ComparisonResult:
- Full: walk both trees, diff every common path.
- Incremental: given a fresh ComparisonState for the pair, only common
  paths whose old-side hash no longer matches the recorded new-side hash
  (or whose new-side file was touched since the state) are diffed.

Per-file read failures are isolated: they land in result.errors and the
walk goes on. Traversal failures abort with ComparisonError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Set, Union

from mcdelta.comparison.differ import LARGE_FILE_THRESHOLD, ContentDiffer
from mcdelta.comparison.hashing import FileFingerprintCache
from mcdelta.comparison.models import ComparisonResult
from mcdelta.comparison.scanner import ScannedTree, scan_tree, validate_root
from mcdelta.config.schema import ComparisonConfig
from mcdelta.exceptions import IOReadError
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import COMPARE
from mcdelta.state.schema import ComparisonState

logger = get_logger(__name__)


def _size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError as e:
        raise IOReadError(f"Cannot stat {path}: {e}", path=path) from e


def _mtime_ms(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns // 1_000_000
    except OSError as e:
        raise IOReadError(f"Cannot stat {path}: {e}", path=path) from e


class ChangeSetComputer:
    """
    Computes added / removed / modified files between two trees.

    Usage:
        computer = ChangeSetComputer.from_config(config.comparison)
        result = computer.compare(old_dir, new_dir)
        state = computer.build_state("1.20.1", "1.20.2", new_dir, result)

        # Later, with a fresh state for the same pair:
        result = computer.compare(old_dir, new_dir, state=state)
    """

    def __init__(
        self,
        cache: Optional[FileFingerprintCache] = None,
        differ: Optional[ContentDiffer] = None,
        large_file_threshold: int = LARGE_FILE_THRESHOLD,
    ) -> None:
        self.cache = cache if cache is not None else FileFingerprintCache()
        self.differ = differ if differ is not None else ContentDiffer()
        self.large_file_threshold = large_file_threshold

    @classmethod
    def from_config(
        cls, config: ComparisonConfig, cache: Optional[FileFingerprintCache] = None
    ) -> "ChangeSetComputer":
        return cls(
            cache=cache,
            differ=ContentDiffer(
                chunk_size=config.chunk_size, text_extensions=config.text_extensions
            ),
            large_file_threshold=config.large_file_threshold,
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def compare(
        self,
        old_dir: Union[str, Path],
        new_dir: Union[str, Path],
        state: Optional[ComparisonState] = None,
    ) -> ComparisonResult:
        """
        Compare two version trees.

        Args:
            old_dir: Root of the old version
            new_dir: Root of the new version
            state: Fresh state from the previous comparison of this pair.
                None runs a full comparison.

        Raises:
            ValidationError: If either root is missing or not a directory
            ComparisonError: If walking a tree fails
        """
        old_root = validate_root(old_dir, "Old version")
        new_root = validate_root(new_dir, "New version")

        old_tree = scan_tree(old_root)
        new_tree = scan_tree(new_root)

        if state is None:
            result = self._compare_full(old_tree, new_tree)
        else:
            result = self._compare_incremental(old_tree, new_tree, state)

        logger.info(f"{COMPARE} {result.mode} comparison done: {result.summary}")
        return result

    def build_state(
        self,
        old_version: str,
        new_version: str,
        new_dir: Union[str, Path],
        result: Optional[ComparisonResult] = None,
        previous: Optional[ComparisonState] = None,
    ) -> ComparisonState:
        """
        Build the state to persist after a comparison.

        Hashes the files of the new tree through the fingerprint cache.
        When the comparison ran from a previous state, a recorded hash is
        reused for any path this run did not diff whose new-side file is
        older than that state. Paths that failed during the comparison
        (result.errors) are left out so the next run looks at them again.
        """
        tree = scan_tree(new_dir)
        skip: Iterable[str] = result.errors if result is not None else ()
        diffed: Iterable[str] = result.diffs if result is not None else ()

        file_hashes: Dict[str, str] = {}
        reused = 0
        for rel in sorted(tree.files):
            if rel in skip:
                continue
            path = tree.files[rel]
            try:
                recorded = previous.file_hashes.get(rel) if previous is not None else None
                if (
                    recorded is not None
                    and rel not in diffed
                    and _mtime_ms(path) < previous.timestamp_ms
                ):
                    file_hashes[rel] = recorded
                    reused += 1
                    continue
                file_hashes[rel] = self.cache.hash(path)
            except IOReadError as e:
                logger.warning(f"{COMPARE} Not recording {rel} in state: {e}")

        if reused:
            logger.debug(f"{COMPARE} Reused {reused} recorded hashes for the new state")

        return ComparisonState(
            old_version=old_version,
            new_version=new_version,
            file_hashes=file_hashes,
        )

    # =========================================================================
    # Algorithms
    # =========================================================================

    def _compare_full(self, old_tree: ScannedTree, new_tree: ScannedTree) -> ComparisonResult:
        old_paths, new_paths = old_tree.paths, new_tree.paths
        result = ComparisonResult(
            added=new_paths - old_paths,
            removed=old_paths - new_paths,
            mode="full",
        )

        for rel in sorted(old_paths & new_paths):
            self._compare_file(rel, old_tree.files[rel], new_tree.files[rel], result)

        return result

    def _compare_incremental(
        self, old_tree: ScannedTree, new_tree: ScannedTree, state: ComparisonState
    ) -> ComparisonResult:
        old_paths, new_paths = old_tree.paths, new_tree.paths
        result = ComparisonResult(
            added=new_paths - old_paths,
            removed=old_paths - new_paths,
            mode="incremental",
        )

        changed: Set[str] = set()
        for rel in old_paths & new_paths:
            try:
                digest = self.cache.hash(old_tree.files[rel])
                if state.file_hashes.get(rel) != digest:
                    changed.add(rel)
                elif _mtime_ms(new_tree.files[rel]) >= state.timestamp_ms:
                    # New side touched since the state was taken
                    changed.add(rel)
            except IOReadError as e:
                self._record_error(rel, e, result)

        logger.debug(
            f"{COMPARE} Incremental: {len(changed)} of "
            f"{len(old_paths & new_paths)} common files need a diff"
        )

        for rel in sorted(changed):
            self._compare_file(rel, old_tree.files[rel], new_tree.files[rel], result)

        return result

    # =========================================================================
    # Per-file dispatch
    # =========================================================================

    def _compare_file(self, rel: str, old: Path, new: Path, result: ComparisonResult) -> None:
        try:
            if max(_size(old), _size(new)) >= self.large_file_threshold:
                entry = self.differ.diff_large(old, new)
            else:
                entry = self.differ.diff_small(old, new)
        except IOReadError as e:
            self._record_error(rel, e, result)
            return

        if entry is not None:
            result.diffs[rel] = entry

    @staticmethod
    def _record_error(rel: str, error: IOReadError, result: ComparisonResult) -> None:
        logger.warning(f"{COMPARE} Skipping {rel}: {error}")
        result.errors[rel] = str(error)


__all__ = ["ChangeSetComputer"]
