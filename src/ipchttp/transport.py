"""HTTP client transport that talks to a daemon over a local channel."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any

import httpcore
import httpx

from ipchttp.channels.selector import CHANNEL_TYPES, detect_platform
from ipchttp.config import TransportConfig
from ipchttp.connection_manager import LocalConnectionManager
from ipchttp.constants import LOCAL_DAEMON_HOST, UNRESOLVED_PORT
from ipchttp.contracts import parse_error_body
from ipchttp.exceptions import DaemonResponseError
from ipchttp.hosts import WIRE_SCHEME, PseudoHost
from ipchttp.resolvers import LocalSchemePortResolver, LoopbackAddressResolver
from ipchttp.socket_factory import LocalSocketFactory

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from ipchttp.channels.base import LocalChannel
    from ipchttp.channels.selector import Platform, PlatformDetector

logger = logging.getLogger(__name__)

# httpx mirrors each of these httpcore errors under the same class name.
_HTTPCORE_ERRORS = (
    httpcore.TimeoutException,
    httpcore.NetworkError,
    httpcore.ProtocolError,
    httpcore.UnsupportedProtocol,
)


@contextlib.contextmanager
def map_httpcore_exceptions() -> Iterator[None]:
    """Re-raise httpcore errors as their httpx namesakes.

    Anything httpcore does not own, notably the ``OSError`` raised when the
    local channel cannot be opened, propagates untouched.
    """
    try:
        yield
    except _HTTPCORE_ERRORS as exc:
        mapped: type[httpx.TransportError] = getattr(
            httpx, type(exc).__name__, httpx.TransportError
        )
        raise mapped(str(exc)) from exc


class _MappedStream(httpx.SyncByteStream):
    def __init__(self, stream: Iterable[bytes]) -> None:
        self._stream = stream

    def __iter__(self) -> Iterator[bytes]:
        with map_httpcore_exceptions():
            yield from self._stream

    def close(self) -> None:
        if hasattr(self._stream, "close"):
            self._stream.close()


class ConnectionManagerTransport(httpx.BaseTransport):
    """httpx transport that routes every request through a connection manager.

    The request's scheme selects the socket factory; when the URL carries no
    explicit port, the port resolver supplies the sentinel for the scheme.
    """

    def __init__(
        self,
        manager: LocalConnectionManager,
        port_resolver: LocalSchemePortResolver,
    ) -> None:
        self._manager = manager
        self._port_resolver = port_resolver

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if not isinstance(request.stream, httpx.SyncByteStream):
            msg = f"Expected a synchronous request body, got {type(request.stream).__name__}"
            raise TypeError(msg)
        url = request.url
        port = url.port
        if port is None:
            resolved = self._port_resolver.resolve(url)
            port = None if resolved == UNRESOLVED_PORT else resolved

        # raw_host is the IDNA-encoded form the wire and the pool key both use.
        route = PseudoHost(
            scheme=url.scheme,
            hostname=url.raw_host.decode("ascii"),
            port=UNRESOLVED_PORT if port is None else port,
        )
        core_request = httpcore.Request(
            method=request.method,
            url=httpcore.URL(
                scheme=WIRE_SCHEME,
                host=url.raw_host,
                port=port,
                target=url.raw_path,
            ),
            headers=request.headers.raw,
            content=request.stream,
            extensions=request.extensions,
        )
        with map_httpcore_exceptions():
            response = self._manager.handle_request(route, core_request)

        return httpx.Response(
            status_code=response.status,
            headers=response.headers,
            stream=_MappedStream(response.stream),
            extensions=response.extensions,
        )

    def close(self) -> None:
        self._manager.close()


class LocalHttpClientTransport:
    """Executes HTTP requests against a daemon listening on a local channel.

    The underlying httpx client is bound to one pseudo-host (by default
    ``docker://localhost``) that is never resolved on the network. All bytes
    go through the domain socket or named pipe at *address*.

    Usage::

        with LocalHttpClientTransport.create("/var/run/docker.sock") as transport:
            response = transport.get("/_ping")

    Args:
        address: Socket path on POSIX, pipe name on Windows.
        config: Timeouts and connect policy; defaults to ``TransportConfig()``.
        host: Pseudo-host literal the client is bound to. Its scheme is the
            one routed to the local channel, e.g. ``podman://localhost``.
        platform_detector: Picks the channel variant when connecting.
        channel_types: Channel class per platform family.

    Raises:
        TransportConfigurationError: If *host* is not a usable pseudo-host.
    """

    def __init__(
        self,
        address: str,
        *,
        config: TransportConfig | None = None,
        host: str = LOCAL_DAEMON_HOST,
        platform_detector: PlatformDetector = detect_platform,
        channel_types: Mapping[Platform, type[LocalChannel]] = CHANNEL_TYPES,
    ) -> None:
        self._config = config or TransportConfig()
        self._host = PseudoHost.create(host)
        port_resolver = LocalSchemePortResolver(scheme=self._host.scheme, port=self._host.port)
        self._address = address

        factory = LocalSocketFactory(
            address,
            platform_detector=platform_detector,
            channel_types=channel_types,
            connect_timeout_policy=self._config.connect_timeout_policy,
        )
        self._manager = LocalConnectionManager(
            {self._host.scheme: factory},
            LoopbackAddressResolver(),
            keepalive_expiry=self._config.keepalive_expiry,
        )
        headers = {"User-Agent": self._config.user_agent} if self._config.user_agent else None
        self._client = httpx.Client(
            base_url=self._host.url,
            transport=ConnectionManagerTransport(self._manager, port_resolver),
            timeout=self._config.timeout(),
            headers=headers,
            trust_env=False,
        )
        logger.info("Local transport for %s bound to %s", self._host, address)

    @classmethod
    def create(
        cls,
        address: str,
        config: TransportConfig | None = None,
    ) -> LocalHttpClientTransport:
        """Create a transport for the daemon at *address*."""
        return cls(address, config=config)

    def __enter__(self) -> LocalHttpClientTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def address(self) -> str:
        return self._address

    @property
    def host(self) -> PseudoHost:
        return self._host

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def connection_manager(self) -> LocalConnectionManager:
        return self._manager

    def build_request(self, method: str, url: httpx.URL | str, **kwargs: Any) -> httpx.Request:
        """Build a request relative to the pseudo-host."""
        return self._client.build_request(method, url, **kwargs)

    def execute(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        """Send *request* and return the daemon's response as-is.

        With ``stream=True`` the body is left unread and the connection stays
        leased until the response is closed.
        """
        return self._client.send(request, stream=stream)

    def get(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return self._execute_checked("GET", url, **kwargs)

    def post(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return self._execute_checked("POST", url, **kwargs)

    def put(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return self._execute_checked("PUT", url, **kwargs)

    def delete(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return self._execute_checked("DELETE", url, **kwargs)

    def head(self, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        return self._execute_checked("HEAD", url, **kwargs)

    def close(self) -> None:
        """Close the client and the held connection."""
        self._client.close()
        self._manager.close()

    def _execute_checked(self, method: str, url: httpx.URL | str, **kwargs: Any) -> httpx.Response:
        response = self.execute(self.build_request(method, url, **kwargs))
        if 400 <= response.status_code <= 599:
            body = parse_error_body(response.content)
            raise DaemonResponseError(
                self._host.to_host_string(),
                str(response.request.url),
                response.status_code,
                response.reason_phrase,
                message=body.message if body else None,
                errors=body.errors if body and response.status_code != 500 else None,
            )
        return response


__all__ = [
    "ConnectionManagerTransport",
    "LocalHttpClientTransport",
    "map_httpcore_exceptions",
]
