"""Common surface shared by the platform-specific local channels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Self

import httpcore

if TYPE_CHECKING:
    import ssl


class LocalChannel(httpcore.NetworkStream, ABC):
    """A connected byte stream to a filesystem-addressed endpoint.

    Subclasses open the endpoint in :meth:`open`; the returned instance is
    already connected. The httpcore engine then drives it through ``read``,
    ``write`` and ``close`` exactly as it would a TCP stream.
    """

    def __init__(self, address: str) -> None:
        self._address = address
        self._closed = False

    @classmethod
    @abstractmethod
    def open(cls, address: str, timeout: float | None = None) -> Self:
        """Connect to *address*, blocking until the endpoint accepts."""

    @property
    def address(self) -> str:
        """The path or pipe name this channel is connected to."""
        return self._address

    @property
    def is_closed(self) -> bool:
        return self._closed

    def start_tls(
        self,
        ssl_context: ssl.SSLContext,
        server_hostname: str | None = None,
        timeout: float | None = None,
    ) -> httpcore.NetworkStream:
        msg = "TLS is not supported over a local channel"
        raise httpcore.UnsupportedProtocol(msg)

    def get_extra_info(self, info: str) -> Any:
        if info == "channel_address":
            return self._address
        return None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{self.__class__.__name__} {self._address!r} {state}>"


__all__ = ["LocalChannel"]
