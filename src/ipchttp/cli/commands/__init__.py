"""CLI commands."""

from __future__ import annotations

from ipchttp.cli.commands.root import cli

__all__ = ["cli"]
