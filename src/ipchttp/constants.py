"""Fixed identifiers for the local daemon pseudo-host."""

from __future__ import annotations

PSEUDO_SCHEME = "docker"
LOCAL_DAEMON_HOST = f"{PSEUDO_SCHEME}://localhost"

# Only used as a routing key inside the HTTP engine, never transmitted.
DEFAULT_DAEMON_PORT = 2376
UNRESOLVED_PORT = -1

LOOPBACK_HOSTNAME = "localhost"

__all__ = [
    "DEFAULT_DAEMON_PORT",
    "LOCAL_DAEMON_HOST",
    "LOOPBACK_HOSTNAME",
    "PSEUDO_SCHEME",
    "UNRESOLVED_PORT",
]
