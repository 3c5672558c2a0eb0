"""Tests for LocalHttpClientTransport over scripted channels."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpcore
import httpx
import pytest

from ipchttp import DaemonResponseError, LocalHttpClientTransport, TransportConfig
from ipchttp.channels import Platform
from ipchttp.resolvers import LocalSchemePortResolver
from ipchttp.transport import ConnectionManagerTransport, map_httpcore_exceptions
from tests.helpers.channels import ScriptedChannel, scripted_channel_type
from tests.helpers.servers import http_response

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

pytestmark = pytest.mark.unit

ADDRESS = "/run/test-daemon.sock"


def _transport(
    channel_type: type[ScriptedChannel],
    config: TransportConfig | None = None,
) -> LocalHttpClientTransport:
    return LocalHttpClientTransport(
        ADDRESS,
        config=config,
        platform_detector=lambda: Platform.POSIX,
        channel_types={platform: channel_type for platform in Platform},
    )


def _json_response(status: int, reason: str, payload: object) -> bytes:
    return http_response(
        json.dumps(payload).encode(),
        status=status,
        reason=reason,
        headers=[("Content-Type", "application/json")],
    )


def test_execute_returns_daemon_response() -> None:
    channel_type = scripted_channel_type(
        http_response(b"OK", headers=[("Api-Version", "1.47")])
    )

    with _transport(channel_type) as transport:
        response = transport.execute(transport.build_request("GET", "/_ping"))

    assert response.status_code == 200
    assert response.content == b"OK"
    assert response.headers["api-version"] == "1.47"
    written = bytes(channel_type.opened[0].written)
    assert written.startswith(b"GET /_ping HTTP/1.1\r\n")
    assert b"Host: localhost\r\n" in written
    assert channel_type.opened[0].address == ADDRESS


def test_execute_does_not_inspect_status() -> None:
    channel_type = scripted_channel_type(_json_response(404, "Not Found", {"message": "gone"}))

    with _transport(channel_type) as transport:
        response = transport.execute(transport.build_request("GET", "/containers/x/json"))

    assert response.status_code == 404


def test_request_body_and_query_reach_the_channel() -> None:
    channel_type = scripted_channel_type(http_response(b"{}", status=201, reason="Created"))

    with _transport(channel_type) as transport:
        response = transport.post("/containers/create", params={"name": "web"}, json={"Image": "x"})

    assert response.status_code == 201
    written = bytes(channel_type.opened[0].written)
    assert written.startswith(b"POST /containers/create?name=web HTTP/1.1\r\n")
    assert written.endswith(b'{"Image":"x"}')


def test_streamed_response_holds_the_connection_until_closed() -> None:
    channel_type = scripted_channel_type(http_response(b"line one\nline two\n"))

    with _transport(channel_type) as transport:
        response = transport.execute(transport.build_request("GET", "/events"), stream=True)
        assert transport.connection_manager.is_leased
        assert list(response.iter_lines()) == ["line one", "line two"]
        response.close()
        assert not transport.connection_manager.is_leased


def test_user_agent_is_sent() -> None:
    channel_type = scripted_channel_type(http_response(b"OK"))
    config = TransportConfig(user_agent="ipchttp-tests/1.0")

    with _transport(channel_type, config) as transport:
        transport.get("/_ping")

    assert b"User-Agent: ipchttp-tests/1.0\r\n" in bytes(channel_type.opened[0].written)


class TestDaemonResponseError:
    def test_client_error_carries_message_and_errors(self) -> None:
        payload = {
            "message": "bad request",
            "errors": [{"code": "InvalidName", "message": "name is invalid"}],
        }
        channel_type = scripted_channel_type(_json_response(400, "Bad Request", payload))

        with _transport(channel_type) as transport, pytest.raises(DaemonResponseError) as excinfo:
            transport.get("/containers/create")

        error = excinfo.value
        assert error.status_code == 400
        assert error.reason_phrase == "Bad Request"
        assert error.host == "docker://localhost:2376"
        assert error.url.endswith("/containers/create")
        assert error.message == "bad request"
        assert [detail.code for detail in error.errors] == ["InvalidName"]
        assert "InvalidName: name is invalid" in str(error)

    def test_server_error_omits_error_list(self) -> None:
        payload = {"message": "boom", "errors": [{"code": "Internal", "message": "x"}]}
        channel_type = scripted_channel_type(_json_response(500, "Internal Server Error", payload))

        with _transport(channel_type) as transport, pytest.raises(DaemonResponseError) as excinfo:
            transport.delete("/containers/x")

        assert excinfo.value.message == "boom"
        assert excinfo.value.errors == []

    def test_non_json_body_is_tolerated(self) -> None:
        channel_type = scripted_channel_type(
            http_response(b"<html>oops</html>", status=502, reason="Bad Gateway")
        )

        with _transport(channel_type) as transport, pytest.raises(DaemonResponseError) as excinfo:
            transport.get("/info")

        assert excinfo.value.message is None
        assert str(excinfo.value).startswith("Error response 502 Bad Gateway")


class TestRouting:
    def test_foreign_scheme_is_refused_without_opening_a_channel(self) -> None:
        channel_type = scripted_channel_type(http_response(b"OK"))

        with _transport(channel_type) as transport:
            request = transport.build_request("GET", "http://example.com/")
            with pytest.raises(httpx.UnsupportedProtocol):
                transport.execute(request)

            assert channel_type.opened == []
            assert not transport.connection_manager.is_leased

    def test_explicit_port_routes_to_a_separate_connection(self) -> None:
        channel_type = scripted_channel_type(http_response(b"a"), http_response(b"b"))

        with _transport(channel_type) as transport:
            transport.get("/_ping")
            transport.get("docker://localhost:9999/_ping")

        assert len(channel_type.opened) == 2

    def test_international_pseudo_host_reaches_the_channel(self) -> None:
        channel_type = scripted_channel_type(http_response(b"OK"))

        with _transport(channel_type) as transport:
            response = transport.get("docker://bücher.example/x")

        assert response.content == b"OK"
        written = bytes(channel_type.opened[0].written)
        assert written.startswith(b"GET /x HTTP/1.1\r\n")
        assert b"Host: xn--bcher-kva.example\r\n" in written

    def test_custom_pseudo_scheme_is_routed_to_the_channel(self) -> None:
        channel_type = scripted_channel_type(http_response(b"OK"))
        transport = LocalHttpClientTransport(
            ADDRESS,
            host="podman://localhost",
            platform_detector=lambda: Platform.POSIX,
            channel_types={platform: channel_type for platform in Platform},
        )

        with transport:
            assert transport.host.scheme == "podman"
            assert transport.host.port == 2376
            assert transport.get("/_ping").content == b"OK"

        assert len(channel_type.opened) == 1

    def test_async_request_body_is_rejected(self) -> None:
        async def _body() -> AsyncIterator[bytes]:
            yield b"data"

        with _transport(scripted_channel_type()) as transport:
            adapter = ConnectionManagerTransport(
                transport.connection_manager, LocalSchemePortResolver()
            )
            request = httpx.Request("POST", "docker://localhost/build", content=_body())

            with pytest.raises(TypeError, match="synchronous request body"):
                adapter.handle_request(request)


class TestConnectTimeoutPolicy:
    def test_ignore_opens_without_timeout(self) -> None:
        channel_type = scripted_channel_type(http_response(b"OK"))
        config = TransportConfig(connect_timeout=2.5)

        with _transport(channel_type, config) as transport:
            transport.get("/_ping")

        assert channel_type.opened[0].timeout is None

    def test_honor_passes_connect_timeout(self) -> None:
        channel_type = scripted_channel_type(http_response(b"OK"))
        config = TransportConfig(connect_timeout_policy="honor", connect_timeout=2.5)

        with _transport(channel_type, config) as transport:
            transport.get("/_ping")

        assert channel_type.opened[0].timeout == 2.5


class TestConnectFailures:
    @pytest.mark.parametrize(
        "error",
        [
            FileNotFoundError(2, "No such file or directory"),
            ConnectionRefusedError(111, "Connection refused"),
            PermissionError(13, "Permission denied"),
        ],
    )
    def test_open_error_propagates_unchanged(self, error: OSError) -> None:
        channel_type = scripted_channel_type(open_error=error)

        with _transport(channel_type) as transport:
            with pytest.raises(type(error)) as excinfo:
                transport.get("/_ping")

            assert excinfo.value is error
            assert not transport.connection_manager.is_leased

    def test_transport_recovers_after_failure(self) -> None:
        failing = scripted_channel_type(open_error=FileNotFoundError(2, "missing"))

        with _transport(failing) as transport:
            with pytest.raises(FileNotFoundError):
                transport.get("/_ping")
            failing.open_error = None
            failing.script = [http_response(b"OK")]

            assert transport.get("/_ping").content == b"OK"


class TestExceptionMapping:
    @pytest.mark.parametrize(
        ("raised", "expected"),
        [
            (httpcore.ReadTimeout("slow"), httpx.ReadTimeout),
            (httpcore.WriteError("broken"), httpx.WriteError),
            (httpcore.PoolTimeout("busy"), httpx.PoolTimeout),
            (httpcore.RemoteProtocolError("bad"), httpx.RemoteProtocolError),
        ],
    )
    def test_httpcore_errors_become_httpx_errors(
        self, raised: Exception, expected: type[Exception]
    ) -> None:
        with pytest.raises(expected) as excinfo, map_httpcore_exceptions():
            raise raised

        assert excinfo.type is expected
        assert excinfo.value.__cause__ is raised

    def test_other_errors_pass_through(self) -> None:
        error = BrokenPipeError(32, "Broken pipe")
        with pytest.raises(BrokenPipeError) as excinfo, map_httpcore_exceptions():
            raise error

        assert excinfo.value is error
