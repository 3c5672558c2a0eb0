"""Request commands that talk to a daemon over its local channel."""

from __future__ import annotations

import sys
from pathlib import Path

import click
import httpx

from ipchttp.transport import LocalHttpClientTransport

from .config import load_config_or_exit


def _parse_headers(values: tuple[str, ...]) -> list[tuple[str, str]]:
    headers: list[tuple[str, str]] = []
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            msg = f"Expected 'Name: value', got {raw!r}"
            raise click.BadParameter(msg, param_hint="--header")
        headers.append((name.strip(), value.strip()))
    return headers


_config_option = click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with a [transport] table",
)


@click.command()
@click.argument("address")
@click.argument("path", default="/")
@click.option("-X", "--method", default="GET", show_default=True, help="HTTP method")
@click.option("-d", "--data", default=None, help="Request body")
@click.option("-H", "--header", "headers", multiple=True, help="Extra header, 'Name: value'")
@click.option("-i", "--include", is_flag=True, help="Print the status line and headers")
@_config_option
def request(
    address: str,
    path: str,
    method: str,
    data: str | None,
    headers: tuple[str, ...],
    include: bool,
    config_file: Path | None,
) -> None:
    """Send one request to the daemon listening at ADDRESS."""
    parsed_headers = _parse_headers(headers)
    with LocalHttpClientTransport.create(address, load_config_or_exit(config_file)) as transport:
        try:
            response = transport.execute(
                transport.build_request(
                    method.upper(),
                    path,
                    content=data.encode("utf-8") if data is not None else None,
                    headers=parsed_headers,
                )
            )
        except (OSError, httpx.TransportError) as exc:
            click.secho(f"Request to {address} failed: {exc}", fg="red", err=True)
            sys.exit(1)

    if include:
        click.echo(f"{response.http_version} {response.status_code} {response.reason_phrase}")
        for name, value in response.headers.items():
            click.echo(f"{name}: {value}")
        click.echo()
    click.echo(response.text, nl=False)
    if response.is_error:
        sys.exit(1)


@click.command()
@click.argument("address")
@click.option("--path", default="/_ping", show_default=True, help="Health endpoint")
@_config_option
def ping(address: str, path: str, config_file: Path | None) -> None:
    """Check that a daemon answers on ADDRESS."""
    with LocalHttpClientTransport.create(address, load_config_or_exit(config_file)) as transport:
        try:
            response = transport.execute(transport.build_request("GET", path))
        except (OSError, httpx.TransportError) as exc:
            click.secho(f"Daemon at {address} is unreachable: {exc}", fg="red", err=True)
            sys.exit(1)

    if response.is_success:
        click.secho(f"Daemon at {address} answered {response.status_code}", fg="green")
        return
    click.secho(
        f"Daemon at {address} answered {response.status_code} {response.reason_phrase}",
        fg="yellow",
    )
    sys.exit(1)
