"""CLI entry point for ipchttp."""

from __future__ import annotations

from ipchttp.cli.commands import cli

if __name__ == "__main__":
    cli()
