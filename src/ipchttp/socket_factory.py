"""Factory producing connected local channels for the HTTP engine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ipchttp.channels.selector import CHANNEL_TYPES, channel_type_for, detect_platform

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ipchttp.channels.base import LocalChannel
    from ipchttp.channels.selector import Platform, PlatformDetector
    from ipchttp.config import ConnectTimeoutPolicyLiteral
    from ipchttp.hosts import PseudoHost

logger = logging.getLogger(__name__)

type SocketContext = dict[str, Any]

CONTEXT_CONNECT_TIMEOUT = "connect_timeout"
CONTEXT_ROUTE = "route"


class LocalSocketFactory:
    """Opens the platform's local channel on one fixed address.

    The platform decision is taken on every :meth:`create_socket` call by the
    injected detector, so a factory never caches an OS-specific type.

    Args:
        address: Socket path (POSIX) or pipe name (Windows).
        platform_detector: Callable returning the running platform family.
        channel_types: Channel class per platform family.
        connect_timeout_policy: ``ignore`` connects without a timeout;
            ``honor`` applies the engine's connect timeout when the channel
            type supports one.
    """

    def __init__(
        self,
        address: str,
        *,
        platform_detector: PlatformDetector = detect_platform,
        channel_types: Mapping[Platform, type[LocalChannel]] = CHANNEL_TYPES,
        connect_timeout_policy: ConnectTimeoutPolicyLiteral = "ignore",
    ) -> None:
        self._address = address
        self._platform_detector = platform_detector
        self._channel_types = channel_types
        self._connect_timeout_policy = connect_timeout_policy

    @property
    def address(self) -> str:
        return self._address

    @property
    def connect_timeout_policy(self) -> ConnectTimeoutPolicyLiteral:
        return self._connect_timeout_policy

    def create_socket(self, context: SocketContext | None = None) -> LocalChannel:
        """Open a channel to the fixed address.

        The connection to the endpoint is made here rather than in
        :meth:`connect_socket`.

        Raises:
            OSError: Unchanged from the platform open call.
        """
        context = context or {}
        channel_cls = channel_type_for(self._platform_detector(), self._channel_types)
        timeout = None
        if self._connect_timeout_policy == "honor":
            timeout = context.get(CONTEXT_CONNECT_TIMEOUT)
        logger.debug(
            "Opening %s to %s (connect timeout: %s)",
            channel_cls.__name__,
            self._address,
            timeout,
        )
        return channel_cls.open(self._address, timeout)

    def connect_socket(
        self,
        timeout: float | None,
        socket: LocalChannel,
        host: PseudoHost | None,
        remote_address: tuple[str, int] | None,
        local_address: str | None,
        context: SocketContext | None = None,
    ) -> LocalChannel:
        """Return *socket* as-is; the channel is already connected."""
        del timeout, host, remote_address, local_address, context
        return socket


__all__ = [
    "CONTEXT_CONNECT_TIMEOUT",
    "CONTEXT_ROUTE",
    "LocalSocketFactory",
    "SocketContext",
]
