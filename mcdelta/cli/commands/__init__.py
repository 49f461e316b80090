# mcdelta/cli/commands/__init__.py
"""CLI command implementations (imported lazily by mcdelta.cli.cli)."""
