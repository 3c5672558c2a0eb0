"""ipchttp: drive an HTTP client over a Unix domain socket or Windows named pipe."""

from ipchttp.channels import (
    CHANNEL_TYPES,
    DomainSocketChannel,
    LocalChannel,
    NamedPipeChannel,
    Platform,
    channel_type_for,
    detect_platform,
)
from ipchttp.config import TransportConfig
from ipchttp.connection_manager import LocalConnectionManager, SocketFactoryBackend
from ipchttp.constants import (
    DEFAULT_DAEMON_PORT,
    LOCAL_DAEMON_HOST,
    PSEUDO_SCHEME,
    UNRESOLVED_PORT,
)
from ipchttp.exceptions import DaemonResponseError, IpcHttpError, TransportConfigurationError
from ipchttp.hosts import PseudoHost
from ipchttp.resolvers import LocalSchemePortResolver, LoopbackAddressResolver
from ipchttp.socket_factory import LocalSocketFactory
from ipchttp.transport import ConnectionManagerTransport, LocalHttpClientTransport

__version__ = "0.1.0"

__all__ = [
    "CHANNEL_TYPES",
    "DEFAULT_DAEMON_PORT",
    "LOCAL_DAEMON_HOST",
    "PSEUDO_SCHEME",
    "UNRESOLVED_PORT",
    "ConnectionManagerTransport",
    "DaemonResponseError",
    "DomainSocketChannel",
    "IpcHttpError",
    "LocalChannel",
    "LocalConnectionManager",
    "LocalHttpClientTransport",
    "LocalSchemePortResolver",
    "LocalSocketFactory",
    "LoopbackAddressResolver",
    "NamedPipeChannel",
    "Platform",
    "PseudoHost",
    "SocketFactoryBackend",
    "TransportConfig",
    "TransportConfigurationError",
    "channel_type_for",
    "detect_platform",
]
