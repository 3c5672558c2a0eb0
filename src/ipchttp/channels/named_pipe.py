"""Windows local channel backed by a named pipe."""

from __future__ import annotations

import io
import logging
from typing import Any, Self

import httpcore

from ipchttp.channels.base import LocalChannel

logger = logging.getLogger(__name__)


class NamedPipeChannel(LocalChannel):
    """Client end of a named pipe such as ``\\\\.\\pipe\\docker_engine``.

    The pipe is opened as an unbuffered binary file, so every ``read`` and
    ``write`` maps onto a single blocking ``ReadFile``/``WriteFile`` call.
    Pipe handles have no per-call timeout; any timeout passed by the engine
    is ignored.
    """

    def __init__(self, handle: io.RawIOBase, address: str) -> None:
        super().__init__(address)
        self._handle = handle

    @classmethod
    def open(cls, address: str, timeout: float | None = None) -> Self:
        """Open the client end of the pipe named *address*.

        Raises:
            OSError: Unchanged when the pipe does not exist, access is denied
                or every server instance is busy.
        """
        if timeout is not None:
            logger.debug("Named pipes cannot honour a connect timeout of %ss", timeout)
        handle = open(address, "r+b", buffering=0)  # noqa: SIM115
        logger.debug("Connected to named pipe %s", address)
        return cls(handle, address)

    def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        try:
            data = self._handle.read(max_bytes)
        except BrokenPipeError:
            # The server closed its end; report end-of-stream like a socket would.
            return b""
        except OSError as exc:
            raise httpcore.ReadError(str(exc)) from exc
        return data or b""

    def write(self, buffer: bytes, timeout: float | None = None) -> None:
        view = memoryview(buffer)
        try:
            while view:
                written = self._handle.write(view)
                if written is None:
                    continue
                view = view[written:]
        except OSError as exc:
            raise httpcore.WriteError(str(exc)) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._handle.close()
        logger.debug("Closed named pipe %s", self._address)

    def get_extra_info(self, info: str) -> Any:
        if info == "is_readable":
            # Pipes cannot be polled portably; a server hang-up surfaces on the next read.
            return False
        return super().get_extra_info(info)


__all__ = ["NamedPipeChannel"]
