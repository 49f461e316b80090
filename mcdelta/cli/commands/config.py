# mcdelta/cli/commands/config.py
"""
Configuration command.

Usage:
    mcdelta config           # Effective config as YAML
    mcdelta config --path    # Where the user override lives
"""

from __future__ import annotations

import typer
import yaml

from mcdelta.cli.context import CLIContext
from mcdelta.cli.ui import handle_errors, ui
from mcdelta.core.paths import McDeltaPaths


def command(show_path: bool = False) -> None:
    with handle_errors():
        ctx = CLIContext.current()

        if show_path:
            path = ctx.config_path or McDeltaPaths.config()
            typer.echo(str(path))
            if not path.exists():
                ui.info("(not created yet, defaults are in use)")
            return

        config = ctx.config()
        typer.echo(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False))
