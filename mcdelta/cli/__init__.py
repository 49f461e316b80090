# mcdelta/cli/__init__.py
"""
mcdelta CLI.

Usage:
    mcdelta compare 1.20.1 1.20.2
    mcdelta analyze ./mymod reports/diff_report_1.20.1_to_1.20.2.txt
    mcdelta changes list
    mcdelta config
"""

from mcdelta.cli.cli import app, main

__all__ = ["app", "main"]
