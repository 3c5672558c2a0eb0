"""Root CLI command registration."""

from __future__ import annotations

import logging

import click

from ipchttp import __version__

from .config import config
from .request import ping, request

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity written to stderr",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, log_level: str) -> None:
    """Send HTTP requests to a daemon over a Unix socket or named pipe."""
    if version:
        click.echo(f"ipchttp {__version__}")
        ctx.exit(0)

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(request)
cli.add_command(ping)
cli.add_command(config)
