"""Show the effective transport configuration."""

from __future__ import annotations

import sys
import tomllib
from pathlib import Path

import click
from pydantic import ValidationError

from ipchttp.config import TransportConfig
from ipchttp.paths import get_config_path


def load_config_or_exit(config_file: Path | None) -> TransportConfig:
    """Load the transport configuration, exiting with status 1 if it is invalid."""
    try:
        return TransportConfig.load(config_file)
    except (tomllib.TOMLDecodeError, ValidationError, OSError) as exc:
        path = config_file or get_config_path()
        click.secho(f"Invalid configuration in {path}: {exc}", fg="red", err=True)
        sys.exit(1)


@click.command()
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML file to read instead of the default location",
)
def config(config_file: Path | None) -> None:
    """Print the transport configuration that requests would use."""
    path = config_file or get_config_path()
    loaded = load_config_or_exit(path)
    source = path if path.exists() else "defaults"
    click.echo(f"  Source: {source}")
    for key, value in loaded.model_dump().items():
        click.echo(f"  {key}: {value}")
