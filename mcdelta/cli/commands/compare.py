# mcdelta/cli/commands/compare.py
"""
Compare command.

Usage:
    mcdelta compare 1.20.1 1.20.2          # Incremental when a fresh state exists
    mcdelta compare 1.20.1 1.20.2 --full   # Ignore persisted state
"""

from __future__ import annotations

from mcdelta.cli.context import CLIContext
from mcdelta.cli.ui import handle_errors, ui
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import CLI

logger = get_logger(__name__)


def command(old: str, new: str, full: bool = False) -> None:
    """Run a comparison and print its statistics."""
    from mcdelta.service import VersionComparisonService

    with handle_errors():
        config = CLIContext.current().config()
        ui.header(f"Compare {old} -> {new}", "full comparison" if full else "")

        service = VersionComparisonService(config)
        try:
            outcome = service.compare_versions(old, new, force_full=full)
        finally:
            service.shutdown()

        stats = outcome.statistics
        ui.table(
            ["Metric", "Value"],
            [
                ("Mode", outcome.mode),
                ("Added", stats.added),
                ("Modified", stats.modified),
                ("Deleted", stats.deleted),
                ("Total", stats.total),
                ("Lines added", stats.lines_added),
                ("Lines removed", stats.lines_removed),
                ("Size (bytes)", stats.total_size_bytes),
            ],
        )

        if outcome.result.errors:
            ui.warning(f"{len(outcome.result.errors)} file(s) could not be read and were skipped")
            for rel, message in sorted(outcome.result.errors.items()):
                ui.info(f"  {rel}: {message}")

        logger.debug(f"{CLI} Report at {outcome.report_path}")
        ui.success(f"Report: {outcome.report_path}")
