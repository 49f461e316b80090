# mcdelta/cli/cli.py
"""
mcdelta CLI - Main application.

Commands:
    mcdelta compare OLD NEW     Compare two extracted versions
    mcdelta analyze MOD REPORT  Mod impact analysis against a diff report
    mcdelta changes ...         Change history (list, show, delete, backup)
    mcdelta config              View configuration

NOTE: Commands use lazy loading - implementations are imported when invoked.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="mcdelta",
    help="mcdelta - version change detection and mod impact analysis.",
    no_args_is_help=True,
    add_completion=False,
)

changes_app = typer.Typer(help="Inspect and manage the change history.", no_args_is_help=True)
app.add_typer(changes_app, name="changes")


@app.callback()
def main_callback(
    workspace: Optional[Path] = typer.Option(
        None, "--workspace", "-w", help="Workspace directory (default: ./.mcdelta)."
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file override."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Global options."""
    from mcdelta.cli.context import CLIContext

    CLIContext.activate(workspace=workspace, config_path=config, verbose=verbose)
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.INFO)


# =============================================================================
# LAZY COMMANDS
# =============================================================================


@app.command("compare")
def compare(
    old: str = typer.Argument(..., help="Old version id."),
    new: str = typer.Argument(..., help="New version id."),
    full: bool = typer.Option(False, "--full", "-f", help="Ignore saved state, compare everything."),
) -> None:
    """Compare two extracted versions and write a diff report."""
    from mcdelta.cli.commands import compare as mod

    mod.command(old=old, new=new, full=full)


@app.command("analyze")
def analyze(
    mod_report: Path = typer.Argument(..., help="Mod sources (directory or .java file)."),
    version_report: Path = typer.Argument(..., help="Diff report of the game versions."),
) -> None:
    """Analyze how game version changes impact a mod."""
    from mcdelta.cli.commands import analyze as mod

    mod.command(mod_report=mod_report, version_report=version_report)


@app.command("config")
def config(
    show_path: bool = typer.Option(False, "--path", "-p", help="Show config file path."),
) -> None:
    """View the effective configuration."""
    from mcdelta.cli.commands import config as mod

    mod.command(show_path=show_path)


@changes_app.command("list")
def changes_list(
    status: Optional[str] = typer.Option(None, "--status", "-s", help="PENDING, SUCCESS or FAILED."),
    version: Optional[str] = typer.Option(None, "--version", help="Only pairs involving this version."),
) -> None:
    """List recorded comparisons, newest first."""
    from mcdelta.cli.commands import changes as mod

    mod.list_command(status=status, version=version)


@changes_app.command("show")
def changes_show(
    old: str = typer.Argument(..., help="Old version id."),
    new: str = typer.Argument(..., help="New version id."),
) -> None:
    """Show one recorded comparison."""
    from mcdelta.cli.commands import changes as mod

    mod.show_command(old=old, new=new)


@changes_app.command("delete")
def changes_delete(
    old: str = typer.Argument(..., help="Old version id."),
    new: str = typer.Argument(..., help="New version id."),
) -> None:
    """Delete one recorded comparison."""
    from mcdelta.cli.commands import changes as mod

    mod.delete_command(old=old, new=new)


@changes_app.command("backup")
def changes_backup() -> None:
    """Zip the change history (keeps the 5 newest backups)."""
    from mcdelta.cli.commands import changes as mod

    mod.backup_command()


def main() -> None:
    """Console script entry point."""
    from mcdelta.logging.logger import configure_logging

    configure_logging()
    app()


if __name__ == "__main__":
    main()
