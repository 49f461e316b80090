# mcdelta/core/paths.py
"""
Central path management for mcdelta.

ALL components that need file paths should use this module.

Design principles:
- Single source of truth
- Workspace-relative by default (CWD/.mcdelta/)
- Easy to override for testing (set_workspace or MCDELTA_WORKSPACE)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

WORKSPACE_ENV_VAR = "MCDELTA_WORKSPACE"


class McDeltaPaths:
    """
    Central path management for mcdelta.

    Usage:
        from mcdelta.core.paths import McDeltaPaths

        versions = McDeltaPaths.versions()
        state_file = McDeltaPaths.state_dir() / "..."

        # Override workspace for testing
        McDeltaPaths.set_workspace("/tmp/test_mcdelta")
    """

    _workspace_override: Optional[Path] = None

    @classmethod
    def set_workspace(cls, path: Optional[str | Path]) -> None:
        """
        Override the workspace root.

        Pass None to reset to the default (env var, then CWD).
        """
        if path is None:
            cls._workspace_override = None
        else:
            cls._workspace_override = Path(path)

    @classmethod
    def reset(cls) -> None:
        """Reset to default workspace. Useful in tests."""
        cls._workspace_override = None

    # =========================================================================
    # Core Paths
    # =========================================================================

    @classmethod
    def workspace(cls) -> Path:
        """
        The mcdelta workspace directory.

        Resolution order: set_workspace() override, $MCDELTA_WORKSPACE, {CWD}/.mcdelta
        """
        if cls._workspace_override is not None:
            return cls._workspace_override
        env = os.environ.get(WORKSPACE_ENV_VAR)
        if env:
            return Path(env)
        return Path.cwd() / ".mcdelta"

    @classmethod
    def ensure_workspace(cls) -> Path:
        """Get workspace path and create it if it doesn't exist."""
        path = cls.workspace()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @classmethod
    def config(cls) -> Path:
        """User config override. Location: {workspace}/config.yaml"""
        return cls.workspace() / "config.yaml"

    # =========================================================================
    # Data Directories
    # =========================================================================

    @classmethod
    def versions(cls) -> Path:
        """Extracted version trees, one directory per version id."""
        return cls.workspace() / "versions"

    @classmethod
    def version_dir(cls, version: str) -> Path:
        """Tree root for a single version id."""
        return cls.versions() / version

    @classmethod
    def reports(cls) -> Path:
        """Generated diff and analysis reports."""
        return cls.workspace() / "reports"

    @classmethod
    def state_dir(cls) -> Path:
        """Persisted comparison states."""
        return cls.workspace() / "state"

    @classmethod
    def changes(cls) -> Path:
        """Change history."""
        return cls.workspace() / "changes"

    @classmethod
    def changes_backup(cls) -> Path:
        """Zipped change history backups."""
        return cls.workspace() / "changes_backup"

    @classmethod
    def ensure_all(cls) -> None:
        """Create every data directory."""
        for path in (
            cls.versions(),
            cls.reports(),
            cls.state_dir(),
            cls.changes(),
            cls.changes_backup(),
        ):
            path.mkdir(parents=True, exist_ok=True)


__all__ = ["McDeltaPaths", "WORKSPACE_ENV_VAR"]
