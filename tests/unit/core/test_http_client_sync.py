"""
Tests for HTTPClient blocking methods.
"""

import threading

import httpx
import pytest
import respx

from duplex_http.core.config import ClientConfig
from duplex_http.core.exceptions import (
    ConnectionError,
    HttpStatusError,
    InvalidURLError,
    NetworkError,
    TimeoutError,
)
from duplex_http.core.global_config import GlobalConfig
from duplex_http.core.http_client import HTTPClient

URL = "https://api.example.com/items"


class TestSyncMethods:
    """Test get_sync/post_sync/... return bodies or raise."""

    @respx.mock
    def test_get_sync_returns_body(self, client):
        respx.get(URL).mock(return_value=httpx.Response(200, content=b'{"items":[]}'))
        assert client.get_sync(URL) == b'{"items":[]}'

    @respx.mock
    @pytest.mark.parametrize("method", ["post", "put", "patch"])
    def test_body_methods_send_data(self, client, method):
        route = respx.route(method=method.upper(), url=URL).mock(
            return_value=httpx.Response(200, content=b"stored")
        )

        result = getattr(client, f"{method}_sync")(URL, '{"name":"x"}')

        assert result == b"stored"
        assert route.calls.last.request.content == b'{"name":"x"}'

    @respx.mock
    def test_delete_and_head(self, client):
        respx.delete(URL).mock(return_value=httpx.Response(204))
        respx.head(URL).mock(return_value=httpx.Response(200))

        assert client.delete_sync(URL) == b""
        assert client.head_sync(URL) == b""

    @respx.mock
    def test_status_300_is_success(self, client):
        respx.get(URL).mock(return_value=httpx.Response(300, content=b"choices"))
        assert client.get_sync(URL) == b"choices"

    @respx.mock
    def test_status_301_without_location_is_failure(self, client):
        respx.get(URL).mock(return_value=httpx.Response(301, content=b"moved"))

        with pytest.raises(HttpStatusError) as exc_info:
            client.get_sync(URL)
        assert exc_info.value.status_code == 301

    @respx.mock
    def test_redirect_followed(self, client):
        respx.get(URL).mock(
            return_value=httpx.Response(302, headers={"Location": "https://api.example.com/new"})
        )
        respx.get("https://api.example.com/new").mock(return_value=httpx.Response(200, content=b"new"))

        assert client.get_sync(URL) == b"new"

    @respx.mock
    def test_404_raises_with_body_message(self, client):
        respx.get(URL).mock(return_value=httpx.Response(404, content=b'{"error":"not found"}'))

        with pytest.raises(NetworkError) as exc_info:
            client.get_sync(URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == '{"error":"not found"}'

    @respx.mock
    def test_connect_error(self, client):
        respx.get(URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(ConnectionError) as exc_info:
            client.get_sync(URL)
        assert exc_info.value.status_code == 0
        assert "Connection refused" in exc_info.value.message

    @respx.mock
    def test_timeout(self, client):
        respx.get(URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(TimeoutError):
            client.get_sync(URL)

    def test_invalid_url(self, client):
        with pytest.raises(InvalidURLError):
            client.get_sync("not a url")

    @respx.mock
    def test_no_pending_operations_after_call(self, client):
        respx.get(URL).mock(return_value=httpx.Response(500))

        with pytest.raises(HttpStatusError):
            client.get_sync(URL)
        assert client.transport.pending_count() == 0

    @respx.mock
    def test_sync_does_not_emit_events(self, client):
        respx.get(URL).mock(return_value=httpx.Response(200))
        calls = []
        client.success.connect(calls.append)
        client.error.connect(calls.append)

        client.get_sync(URL)
        assert calls == []


class TestRequestBuilding:
    """Test headers, base_url and argument validation."""

    @respx.mock
    def test_default_headers_sent(self, client):
        route = respx.get(URL).mock(return_value=httpx.Response(200))
        client.get_sync(URL)
        assert route.calls.last.request.headers["Accept"] == "application/json"

    @respx.mock
    def test_bearer_token_injected(self, client, global_config):
        route = respx.get(URL).mock(return_value=httpx.Response(200))

        global_config.set_bearer_token("abc")
        client.get_sync(URL)

        assert route.calls.last.request.headers["Authorization"] == "Bearer abc"

    @respx.mock
    def test_token_change_visible_to_next_request(self, client, global_config):
        route = respx.get(URL).mock(return_value=httpx.Response(200))

        global_config.set_bearer_token("first")
        client.get_sync(URL)
        global_config.set_bearer_token("second")
        client.get_sync(URL)
        global_config.clear_bearer_token()
        client.get_sync(URL)

        requests = [call.request for call in route.calls]
        assert requests[0].headers["Authorization"] == "Bearer first"
        assert requests[1].headers["Authorization"] == "Bearer second"
        assert "Authorization" not in requests[2].headers

    @respx.mock
    def test_token_replaces_instance_authorization(self, global_config):
        route = respx.get(URL).mock(return_value=httpx.Response(200))
        global_config.set_bearer_token("abc")

        with HTTPClient(headers={"authorization": "Basic xyz"}, global_config=global_config) as client:
            client.get_sync(URL)

        values = route.calls.last.request.headers.get_list("Authorization")
        assert values == ["Bearer abc"]

    @respx.mock
    def test_base_url(self, global_config):
        route = respx.get(URL).mock(return_value=httpx.Response(200))
        config = ClientConfig.create(base_url="https://api.example.com/")

        with HTTPClient(config=config, global_config=global_config) as client:
            client.get_sync("/items")
            client.get_sync(URL)

        assert route.call_count == 2

    @pytest.mark.parametrize("method", ["GET", "HEAD", "DELETE"])
    def test_body_rejected_for_bodyless_methods(self, client, method):
        with pytest.raises(ValueError, match="do not take a body"):
            client.request_sync(method, URL, b"data")

    def test_unsupported_method(self, client):
        with pytest.raises(ValueError):
            client.request_sync("TRACE", URL)


class TestReentrancy:
    """Test sync calls from event observers."""

    @respx.mock
    def test_sync_call_from_observer_raises(self, client):
        respx.get(URL).mock(return_value=httpx.Response(200))
        errors = []
        done = threading.Event()

        def observer(body):
            try:
                client.get_sync(URL)
            except RuntimeError as e:
                errors.append(e)
            finally:
                done.set()

        client.success.connect(observer)
        client.get(URL).result(timeout=5)

        assert done.is_set()
        assert len(errors) == 1
        assert "completion callback" in str(errors[0])


class TestDownload:
    """Test download_sync."""

    @respx.mock
    def test_download_writes_file(self, client, tmp_path):
        respx.get(URL).mock(return_value=httpx.Response(200, content=b"\x89PNG data"))
        target = tmp_path / "image.png"

        written = client.download_sync(URL, str(target))

        assert written == 9
        assert target.read_bytes() == b"\x89PNG data"

    @respx.mock
    def test_download_failure_creates_no_file(self, client, tmp_path):
        respx.get(URL).mock(return_value=httpx.Response(404))
        target = tmp_path / "missing.bin"

        with pytest.raises(HttpStatusError):
            client.download_sync(URL, str(target))
        assert not target.exists()


class TestLifecycle:
    """Test close and shared transports."""

    def test_closed_client_rejects_requests(self, global_config):
        client = HTTPClient(global_config=global_config)
        client.close()

        with pytest.raises(RuntimeError, match="closed"):
            client.get(URL)

    def test_shared_transport_not_closed_by_client(self, transport):
        client = HTTPClient(transport=transport)
        client.close()

        assert not transport.closed
        assert client.global_config is transport.global_config

    def test_mismatched_global_config_rejected(self, transport):
        with pytest.raises(ValueError, match="same object"):
            HTTPClient(transport=transport, global_config=GlobalConfig())

    def test_matching_global_config_accepted(self, transport, global_config):
        client = HTTPClient(transport=transport, global_config=global_config)
        assert client.global_config is global_config

    def test_headers_property_is_copy(self, client):
        headers = client.headers
        headers["X"] = "y"
        assert "X" not in client.headers


class TestRequestOutcome:
    """Test the non-raising blocking form."""

    @respx.mock
    def test_success(self, client):
        respx.get(URL).mock(return_value=httpx.Response(200, content=b"ok"))

        outcome = client.request_outcome("GET", URL)

        assert outcome.ok
        assert outcome.body == b"ok"

    @respx.mock
    def test_failure_returned_not_raised(self, client):
        respx.post(URL).mock(return_value=httpx.Response(422, content=b"invalid"))

        outcome = client.request_outcome("POST", URL, b"{}")

        assert not outcome.ok
        assert outcome.status_code == 422
        assert outcome.error.message == "invalid"
        assert client.transport.pending_count() == 0

    @respx.mock
    def test_transport_failure_status_zero(self, client):
        respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))

        outcome = client.request_outcome("GET", URL)
        assert outcome.status_code == 0
        assert isinstance(outcome.error, ConnectionError)
