"""The pseudo-host every local request is routed through."""

from __future__ import annotations

from dataclasses import dataclass

import httpcore
import httpx

from ipchttp.constants import UNRESOLVED_PORT
from ipchttp.exceptions import TransportConfigurationError
from ipchttp.resolvers import LocalSchemePortResolver

# The channel carries plain HTTP/1.1 regardless of the pseudo-scheme.
WIRE_SCHEME = b"http"


@dataclass(frozen=True)
class PseudoHost:
    """Scheme, hostname and port identifying the local daemon to the engine.

    Attributes:
        scheme: The custom scheme selecting the local transport.
        hostname: Literal hostname, sent as the ``Host`` header.
        port: Sentinel port resolved for *scheme*.
    """

    scheme: str
    hostname: str
    port: int

    @classmethod
    def create(
        cls,
        literal: str,
        port_resolver: LocalSchemePortResolver | None = None,
    ) -> PseudoHost:
        """Parse *literal* (``scheme://hostname``) into a pseudo-host.

        Without *port_resolver* the literal's own scheme is given the default
        daemon port. Internationalised hostnames are kept in their IDNA form.

        Raises:
            TransportConfigurationError: If the literal is malformed or its
                scheme has no resolvable port.
        """
        try:
            url = httpx.URL(literal)
            if not url.scheme or not url.raw_host:
                msg = f"Expected 'scheme://hostname', got {literal!r}"
                raise ValueError(msg)
            if port_resolver is None:
                port_resolver = LocalSchemePortResolver(scheme=url.scheme)
            port = url.port if url.port is not None else port_resolver.resolve(url)
            if port == UNRESOLVED_PORT:
                msg = f"No port is registered for scheme {url.scheme!r}"
                raise ValueError(msg)
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            msg = "Error creating local daemon host address"
            raise TransportConfigurationError(msg) from exc
        return cls(scheme=url.scheme, hostname=url.raw_host.decode("ascii"), port=port)

    @property
    def url(self) -> httpx.URL:
        """Base URL handed to the httpx client."""
        return httpx.URL(f"{self.scheme}://{self.hostname}")

    @property
    def origin(self) -> httpcore.Origin:
        """Wire-level origin of connections opened for this host."""
        return httpcore.Origin(WIRE_SCHEME, self.hostname.encode("ascii"), self.port)

    def to_host_string(self) -> str:
        return f"{self.scheme}://{self.hostname}:{self.port}"

    def __str__(self) -> str:
        return self.to_host_string()


__all__ = ["WIRE_SCHEME", "PseudoHost"]
