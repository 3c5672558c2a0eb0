"""Pytest fixtures for ipchttp tests."""

from __future__ import annotations

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from hypothesis import Phase, Verbosity, settings

_TEST_BASE_DIR = Path(tempfile.mkdtemp(prefix="ipchttp-tests-"))
os.environ["IPCHTTP_CONFIG_DIR"] = str(_TEST_BASE_DIR / "config")

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from tests.helpers.servers import Handler, UnixHttpServer


settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=20,
    deadline=500,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def socket_dir() -> Generator[Path, None, None]:
    """Short-lived directory under /tmp; socket paths must stay under ~100 bytes."""
    if sys.platform == "win32":
        pytest.skip("Unix sockets unavailable on Windows")
    short_tmp = Path(tempfile.mkdtemp(prefix="ih-", dir="/tmp"))
    yield short_tmp
    shutil.rmtree(short_tmp, ignore_errors=True)


@pytest.fixture
def unix_server(socket_dir: Path) -> Generator[Callable[..., UnixHttpServer], None, None]:
    """Factory starting :class:`UnixHttpServer` instances that are stopped on teardown."""
    from tests.helpers.servers import UnixHttpServer

    servers: list[UnixHttpServer] = []

    def _start(handler: Handler, *, delay: float = 0.0, name: str = "daemon.sock") -> UnixHttpServer:
        server = UnixHttpServer(str(socket_dir / name), handler, delay=delay).start()
        servers.append(server)
        return server

    yield _start
    for server in servers:
        server.stop()


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    del session, exitstatus
    shutil.rmtree(_TEST_BASE_DIR, ignore_errors=True)
