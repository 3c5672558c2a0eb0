"""Stub resolvers that satisfy the HTTP engine's addressing invariants.

The engine expects every route to carry a resolved network address and a
numeric port. Neither is ever used to reach the network: the bytes travel over
the local channel. Both resolvers therefore return fixed values so that the
engine's routing keys stay consistent.
"""

from __future__ import annotations

from ipaddress import IPv4Address
from typing import Protocol

from ipchttp.constants import (
    DEFAULT_DAEMON_PORT,
    LOOPBACK_HOSTNAME,
    PSEUDO_SCHEME,
    UNRESOLVED_PORT,
)

LOOPBACK = IPv4Address("127.0.0.1")


class HasScheme(Protocol):
    @property
    def scheme(self) -> str | bytes: ...


class LoopbackAddressResolver:
    """Address resolver that maps every hostname to the loopback address."""

    def resolve(self, hostname: str) -> list[IPv4Address]:
        return [LOOPBACK]

    def resolve_canonical_name(self, hostname: str) -> str:
        return LOOPBACK_HOSTNAME


class LocalSchemePortResolver:
    """Port resolver that only knows the local pseudo-scheme.

    Any other scheme yields ``UNRESOLVED_PORT`` so that the engine falls back
    to its own defaults instead of being overridden globally.
    """

    def __init__(self, scheme: str = PSEUDO_SCHEME, port: int = DEFAULT_DAEMON_PORT) -> None:
        self._scheme = scheme
        self._port = port

    @property
    def scheme(self) -> str:
        return self._scheme

    def resolve(self, host: HasScheme) -> int:
        if host is None:
            msg = "HTTP host must not be None"
            raise ValueError(msg)
        name = host.scheme
        if isinstance(name, bytes):
            name = name.decode("ascii", errors="replace")
        if name == self._scheme:
            return self._port
        return UNRESOLVED_PORT


__all__ = ["LOOPBACK", "HasScheme", "LocalSchemePortResolver", "LoopbackAddressResolver"]
