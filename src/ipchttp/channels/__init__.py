"""Platform-specific local channels and the selector that picks between them."""

from __future__ import annotations

from ipchttp.channels.base import LocalChannel
from ipchttp.channels.domain_socket import DomainSocketChannel
from ipchttp.channels.named_pipe import NamedPipeChannel
from ipchttp.channels.selector import (
    CHANNEL_TYPES,
    Platform,
    PlatformDetector,
    channel_type_for,
    detect_platform,
)

__all__ = [
    "CHANNEL_TYPES",
    "DomainSocketChannel",
    "LocalChannel",
    "NamedPipeChannel",
    "Platform",
    "PlatformDetector",
    "channel_type_for",
    "detect_platform",
]
