"""Exception hierarchy for ipchttp.

Connect failures are deliberately absent: the OS error raised while opening
the local channel reaches the caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ipchttp.contracts import ErrorDetail


class IpcHttpError(Exception):
    """Base exception for errors raised by ipchttp itself."""


class TransportConfigurationError(IpcHttpError):
    """Raised when a transport cannot be constructed."""


class DaemonResponseError(IpcHttpError):
    """Raised by the convenience verbs when the daemon answers 4xx or 5xx."""

    def __init__(
        self,
        host: str,
        url: str,
        status_code: int,
        reason_phrase: str,
        *,
        message: str | None = None,
        errors: list[ErrorDetail] | None = None,
    ) -> None:
        self.host = host
        self.url = url
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.message = message
        self.errors = errors or []
        super().__init__(self._describe())

    def _describe(self) -> str:
        text = (
            f"Error response {self.status_code} {self.reason_phrase} "
            f"from {self.host} for {self.url}"
        )
        if self.message:
            text += f": {self.message}"
        if self.errors:
            details = ", ".join(f"{error.code}: {error.message}" for error in self.errors)
            text += f" [{details}]"
        return text


__all__ = ["DaemonResponseError", "IpcHttpError", "TransportConfigurationError"]
