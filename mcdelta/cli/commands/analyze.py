# mcdelta/cli/commands/analyze.py
"""
Analyze command.

Usage:
    mcdelta analyze ./mymod/src reports/diff_report_1.20.1_to_1.20.2.txt
"""

from __future__ import annotations

from pathlib import Path

from mcdelta.cli.context import CLIContext
from mcdelta.cli.ui import handle_errors, ui
from mcdelta.core.paths import McDeltaPaths

_MAX_ROWS = 20


def command(mod_report: Path, version_report: Path) -> None:
    """Run the retrying impact analysis synchronously."""
    from mcdelta.analysis.pipeline import RetryingAnalysisPipeline

    with handle_errors():
        config = CLIContext.current().config()
        ui.header("Mod impact analysis", f"{mod_report} vs {version_report}")

        pipeline = RetryingAnalysisPipeline.from_config(config.analysis, McDeltaPaths.reports())
        try:
            result = pipeline.run(mod_report, version_report)
        finally:
            pipeline.shutdown()

        structure = result.mod.structure
        ui.info(
            f"{len(structure.classes)} classes, {structure.method_count} methods, "
            f"{result.changes.total} changed game files"
        )

        if result.impacts:
            ui.table(
                ["Component", "Type", "Score", "Affected"],
                [
                    (c.name, c.type, f"{c.impact_score:.3f}", ", ".join(sorted(c.affected_dependencies)))
                    for c in result.impacts[:_MAX_ROWS]
                ],
            )
            if len(result.impacts) > _MAX_ROWS:
                ui.info(f"... and {len(result.impacts) - _MAX_ROWS} more")
        else:
            ui.info("No impacted components")

        if result.missing_dependencies:
            ui.warning(f"Missing dependencies: {', '.join(sorted(result.missing_dependencies))}")

        ui.success(f"Report: {result.report_path}")
