"""
cli — command-line interface for hookmap.

Entry points
────────────
  python -m hookmap   (via hookmap/__main__.py)
  hookmap             (via pyproject.toml [project.scripts])

Subcommands: resolve | list | export
"""

from hookmap.cli.main import build_parser, cmd_export, cmd_list, cmd_resolve, main

__all__ = ["build_parser", "cmd_resolve", "cmd_list", "cmd_export", "main"]
