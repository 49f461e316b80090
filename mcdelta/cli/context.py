# mcdelta/cli/context.py
"""
CLI context shared by all commands.

The global options (--workspace, --config, --verbose) are applied once by
the app callback; commands then call CLIContext.current().config().
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

from mcdelta.config.loader import load_config
from mcdelta.config.schema import McDeltaConfig
from mcdelta.core.paths import McDeltaPaths


@dataclass
class CLIContext:
    config_path: Optional[Path] = None
    verbose: bool = False

    _current: ClassVar[Optional["CLIContext"]] = None
    _config: ClassVar[Optional[McDeltaConfig]] = None

    @classmethod
    def activate(
        cls,
        workspace: Optional[Path] = None,
        config_path: Optional[Path] = None,
        verbose: bool = False,
    ) -> "CLIContext":
        """Install the context for this invocation."""
        if workspace is not None:
            McDeltaPaths.set_workspace(workspace)
        cls._current = cls(config_path=config_path, verbose=verbose)
        cls._config = None
        return cls._current

    @classmethod
    def current(cls) -> "CLIContext":
        if cls._current is None:
            cls._current = cls()
        return cls._current

    def config(self) -> McDeltaConfig:
        """Effective configuration, loaded once per invocation."""
        cls = type(self)
        if cls._config is None:
            cls._config = load_config(self.config_path)
        return cls._config


__all__ = ["CLIContext"]
