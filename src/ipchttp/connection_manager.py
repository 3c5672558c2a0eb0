"""Connection manager for the local daemon.

There is exactly one real endpoint behind the pseudo-host. The manager keeps
one ``httpcore.ConnectionPool`` per registered scheme, capped at a single
connection, and leaves leasing, keep-alive and release to the pool. What it
customises is how a connection is made: the scheme registry maps the
pseudo-scheme to a :class:`~ipchttp.socket_factory.LocalSocketFactory`, and
:class:`SocketFactoryBackend` presents that factory to httpcore as a network
backend.
"""

from __future__ import annotations

import logging
import time
from types import MappingProxyType
from typing import TYPE_CHECKING

import httpcore

from ipchttp.hosts import PseudoHost
from ipchttp.resolvers import LoopbackAddressResolver
from ipchttp.socket_factory import CONTEXT_CONNECT_TIMEOUT, CONTEXT_ROUTE

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ipchttp.socket_factory import LocalSocketFactory

logger = logging.getLogger(__name__)


class SocketFactoryBackend(httpcore.NetworkBackend):
    """httpcore network backend that opens local channels instead of TCP sockets.

    The host and port httpcore asks for are run through the address resolver
    for bookkeeping only; the factory always connects to its fixed address.
    """

    def __init__(
        self,
        factory: LocalSocketFactory,
        address_resolver: LoopbackAddressResolver,
        scheme: str,
    ) -> None:
        self._factory = factory
        self._address_resolver = address_resolver
        self._scheme = scheme

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[httpcore.SOCKET_OPTION] | None = None,
    ) -> httpcore.NetworkStream:
        route = PseudoHost(scheme=self._scheme, hostname=host, port=port)
        addresses = self._address_resolver.resolve(host)
        remote_address = (str(addresses[0]), port)
        logger.debug(
            "Connecting %s (%s as %s:%d) through %s",
            route,
            self._address_resolver.resolve_canonical_name(host),
            remote_address[0],
            port,
            self._factory.address,
        )
        context = {CONTEXT_ROUTE: route, CONTEXT_CONNECT_TIMEOUT: timeout}
        channel = self._factory.create_socket(context)
        try:
            return self._factory.connect_socket(
                timeout, channel, route, remote_address, local_address, context
            )
        except BaseException:
            channel.close()
            raise

    def connect_unix_socket(
        self,
        path: str,
        timeout: float | None = None,
        socket_options: Iterable[httpcore.SOCKET_OPTION] | None = None,
    ) -> httpcore.NetworkStream:
        msg = "Local channels are opened by the socket factory, not by path"
        raise httpcore.UnsupportedProtocol(msg)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class LocalConnectionManager:
    """Single-connection manager bound to a scheme registry.

    Each registered scheme gets its own ``httpcore.ConnectionPool`` limited to
    one connection, so concurrent callers queue for it and the engine's
    ``pool`` timeout bounds the wait. A connection is released back to its
    pool when the response stream is closed.

    Args:
        registry: Maps each supported scheme to the factory that opens its
            channel. Requests for any other scheme are refused.
        address_resolver: Resolver used for the engine's address bookkeeping.
        keepalive_expiry: Seconds an idle connection may be reused, or
            ``None`` to keep it until the daemon hangs up.
    """

    def __init__(
        self,
        registry: Mapping[str, LocalSocketFactory],
        address_resolver: LoopbackAddressResolver | None = None,
        *,
        keepalive_expiry: float | None = None,
    ) -> None:
        self._registry: Mapping[str, LocalSocketFactory] = MappingProxyType(dict(registry))
        resolver = address_resolver or LoopbackAddressResolver()
        self._pools = {
            scheme: httpcore.ConnectionPool(
                max_connections=1,
                max_keepalive_connections=1,
                keepalive_expiry=keepalive_expiry,
                network_backend=SocketFactoryBackend(factory, resolver, scheme),
            )
            for scheme, factory in self._registry.items()
        }

    def __enter__(self) -> LocalConnectionManager:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def registry(self) -> Mapping[str, LocalSocketFactory]:
        return self._registry

    @property
    def connections(self) -> list[httpcore.ConnectionInterface]:
        """Connections currently held across all pools."""
        return [connection for pool in self._pools.values() for connection in pool.connections]

    @property
    def is_leased(self) -> bool:
        """True while a connection is serving a request."""
        return any(not connection.is_idle() for connection in self.connections)

    def handle_request(self, route: PseudoHost, request: httpcore.Request) -> httpcore.Response:
        """Send *request* through the pool registered for ``route.scheme``.

        The connection stays leased until the returned response's stream is
        closed.

        Raises:
            httpcore.UnsupportedProtocol: If no factory is registered for the scheme.
            httpcore.PoolTimeout: If the request's pool timeout elapses first.
            ValueError: If *request* targets a different origin than *route*.
            OSError: Unchanged when the local channel cannot be opened.
        """
        pool = self._pools.get(route.scheme)
        if pool is None:
            msg = f"{route.scheme} protocol is not supported"
            raise httpcore.UnsupportedProtocol(msg)
        if request.url.origin != route.origin:
            msg = f"Request for {request.url.origin} does not match route {route}"
            raise ValueError(msg)
        logger.debug("Dispatching %s %s to %s", request.method.decode(), route, pool)
        return pool.handle_request(request)

    def close(self) -> None:
        """Close every held connection; safe to call more than once."""
        for pool in self._pools.values():
            pool.close()


__all__ = ["LocalConnectionManager", "SocketFactoryBackend"]
