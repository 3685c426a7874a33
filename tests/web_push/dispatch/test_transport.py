"""Tests for the httpx transport."""

import httpx
import pytest

from web_push.dispatch import HttpxTransport, PushRequest, PushResponse, Transport
from web_push.types import TransportError

REQUEST = PushRequest(
    url="https://push.example.net/push/abc",
    headers={"TTL": "60", "Content-Encoding": "aesgcm128"},
    body=b"\x01\x02\x03",
)


def _transport(handler) -> tuple[HttpxTransport, httpx.Client]:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpxTransport(client=client), client


class TestHttpxTransport:
    """Tests for HttpxTransport.send."""

    def test_satisfies_protocol(self):
        """Test that HttpxTransport is a Transport."""
        with HttpxTransport() as transport:
            assert isinstance(transport, Transport)

    def test_sends_request_verbatim(self):
        """Test that method, URL, headers and body reach the server unchanged."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, headers={"Location": "/m/1"})

        transport, _ = _transport(handler)
        response = transport.send(REQUEST)

        assert isinstance(response, PushResponse)
        assert response.status_code == 201
        assert response.body == b""
        assert response.headers["location"] == "/m/1"
        assert seen[0].method == "POST"
        assert str(seen[0].url) == REQUEST.url
        assert seen[0].headers["TTL"] == "60"
        assert seen[0].headers["Content-Encoding"] == "aesgcm128"
        assert seen[0].content == b"\x01\x02\x03"

    def test_error_status_raises(self):
        """Test that a non-2xx response raises TransportError with the status."""
        transport, _ = _transport(lambda request: httpx.Response(410, content=b"gone"))

        with pytest.raises(TransportError) as exc_info:
            transport.send(REQUEST)

        assert exc_info.value.status_code == 410
        assert exc_info.value.body == b"gone"
        assert "410" in exc_info.value.message

    def test_network_error_raises(self):
        """Test that connection failures raise TransportError without a status."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport, _ = _transport(handler)

        with pytest.raises(TransportError, match="Network error") as exc_info:
            transport.send(REQUEST)

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_raises(self):
        """Test that timeouts raise TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport, _ = _transport(handler)

        with pytest.raises(TransportError):
            transport.send(REQUEST)

    def test_supplied_client_is_not_closed(self):
        """Test that closing the transport leaves a caller's client open."""
        transport, client = _transport(lambda request: httpx.Response(201))

        transport.close()

        assert not client.is_closed

    def test_owned_client_is_closed(self):
        """Test that the transport closes a client it created."""
        with HttpxTransport(timeout=1.0) as transport:
            client = transport._client

        assert client.is_closed
