"""Runtime choice between the POSIX and Windows local channel."""

from __future__ import annotations

import platform
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

from ipchttp.channels.domain_socket import DomainSocketChannel
from ipchttp.channels.named_pipe import NamedPipeChannel

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ipchttp.channels.base import LocalChannel


class Platform(StrEnum):
    """Operating system families with a distinct local channel primitive."""

    POSIX = "posix"
    WINDOWS = "windows"


type PlatformDetector = Callable[[], Platform]


def detect_platform() -> Platform:
    """Return the platform family of the running interpreter."""
    if platform.system() == "Windows":
        return Platform.WINDOWS
    return Platform.POSIX


CHANNEL_TYPES: Mapping[Platform, type[LocalChannel]] = MappingProxyType(
    {
        Platform.POSIX: DomainSocketChannel,
        Platform.WINDOWS: NamedPipeChannel,
    }
)


def channel_type_for(
    target: Platform,
    channel_types: Mapping[Platform, type[LocalChannel]] = CHANNEL_TYPES,
) -> type[LocalChannel]:
    """Return the channel class registered for *target*.

    Raises:
        LookupError: If no channel type is registered for the platform.
    """
    try:
        return channel_types[Platform(target)]
    except (KeyError, ValueError) as exc:
        msg = f"No local channel registered for platform {target!r}"
        raise LookupError(msg) from exc


__all__ = [
    "CHANNEL_TYPES",
    "Platform",
    "PlatformDetector",
    "channel_type_for",
    "detect_platform",
]
