"""POSIX local channel backed by a Unix domain socket."""

from __future__ import annotations

import logging
import select
import socket
from typing import Any, Self

import httpcore

from ipchttp.channels.base import LocalChannel

logger = logging.getLogger(__name__)


class DomainSocketChannel(LocalChannel):
    """Stream socket connected to a Unix domain socket path.

    Read and write timeouts supplied by the engine are applied per call, the
    same way httpcore's own socket stream applies them.
    """

    def __init__(self, sock: socket.socket, address: str) -> None:
        super().__init__(address)
        self._sock = sock

    @classmethod
    def open(cls, address: str, timeout: float | None = None) -> Self:
        """Connect to the socket file at *address*.

        Raises:
            OSError: Unchanged from ``connect`` when the path is missing, no
                listener is bound, access is denied or *timeout* elapses.
        """
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(timeout)
            sock.connect(address)
        except BaseException:
            sock.close()
            raise
        logger.debug("Connected to domain socket at %s", address)
        return cls(sock, address)

    def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        try:
            self._sock.settimeout(timeout)
            return self._sock.recv(max_bytes)
        except TimeoutError as exc:
            raise httpcore.ReadTimeout(str(exc)) from exc
        except OSError as exc:
            raise httpcore.ReadError(str(exc)) from exc

    def write(self, buffer: bytes, timeout: float | None = None) -> None:
        if not buffer:
            return
        try:
            self._sock.settimeout(timeout)
            self._sock.sendall(buffer)
        except TimeoutError as exc:
            raise httpcore.WriteTimeout(str(exc)) from exc
        except OSError as exc:
            raise httpcore.WriteError(str(exc)) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._sock.close()
        logger.debug("Closed domain socket to %s", self._address)

    def get_extra_info(self, info: str) -> Any:
        if info == "socket":
            return self._sock
        if info == "is_readable":
            return self._is_readable()
        return super().get_extra_info(info)

    def _is_readable(self) -> bool:
        # An idle keep-alive socket only turns readable when the peer hung up.
        if self._closed or self._sock.fileno() < 0:
            return True
        readable, _, _ = select.select([self._sock], [], [], 0)
        return bool(readable)


__all__ = ["DomainSocketChannel"]
