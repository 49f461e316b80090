# mcdelta/cli/commands/changes.py
"""
Change history commands.

Usage:
    mcdelta changes list [--status FAILED] [--version 1.20.1]
    mcdelta changes show 1.20.1 1.20.2
    mcdelta changes delete 1.20.1 1.20.2
    mcdelta changes backup
"""

from __future__ import annotations

from typing import Optional

import typer

from mcdelta.cli.ui import handle_errors, ui
from mcdelta.core.paths import McDeltaPaths
from mcdelta.exceptions import ValidationError
from mcdelta.history.models import ChangeStatus
from mcdelta.history.store import ChangeHistoryStore


def _store() -> ChangeHistoryStore:
    return ChangeHistoryStore(McDeltaPaths.changes(), McDeltaPaths.changes_backup())


def list_command(status: Optional[str] = None, version: Optional[str] = None) -> None:
    with handle_errors():
        try:
            wanted = ChangeStatus(status.upper()) if status else None
        except ValueError:
            choices = ", ".join(s.value for s in ChangeStatus)
            raise ValidationError(f"Unknown status {status!r} (choose from {choices})") from None

        records = _store().list(status=wanted, version=version)
        if not records:
            ui.info("No recorded changes")
            return

        ui.table(
            ["Pair", "Status", "Mode", "Changes", "When"],
            [
                (
                    f"{r.source_version} -> {r.target_version}",
                    r.status.value,
                    r.mode or "-",
                    r.total_changes,
                    r.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                )
                for r in records
            ],
        )


def show_command(old: str, new: str) -> None:
    with handle_errors():
        record = _store().get(old, new)
        if record is None:
            ui.error(f"No recorded change for {old} -> {new}")
            raise typer.Exit(code=1)

        ui.header(f"{record.source_version} -> {record.target_version}", record.status.value)
        if record.error_message:
            ui.error(record.error_message)
        if record.statistics:
            ui.table(["Statistic", "Value"], sorted(record.statistics.items()))
        for title, paths in (
            ("Added", record.added_files),
            ("Modified", record.modified_files),
            ("Deleted", record.deleted_files),
        ):
            if paths:
                ui.section(f"{title} ({len(paths)})")
                for path in paths:
                    ui.print(f"  {path}")
        if record.diff_report_path:
            ui.info(f"Report: {record.diff_report_path}")


def delete_command(old: str, new: str) -> None:
    with handle_errors():
        if _store().delete(old, new):
            ui.success(f"Deleted change record {old} -> {new}")
        else:
            ui.error(f"No recorded change for {old} -> {new}")
            raise typer.Exit(code=1)


def backup_command() -> None:
    with handle_errors():
        path = _store().backup()
        ui.success(f"Backup written to {path}")
