"""
HTTP transport for push delivery.

The push service only needs something that can POST a `PushRequest` and
return the response. `HttpxTransport` is the default implementation;
tests and callers with their own HTTP stack can supply any object that
satisfies the `Transport` protocol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import Protocol, runtime_checkable

import httpx

from web_push.config import DEFAULT_TIMEOUT_SECS
from web_push.types import TransportError

from .request import PushRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PushResponse:
    """Response from a push service."""

    status_code: int
    """HTTP status code."""

    headers: dict[str, str] = field(default_factory=dict)
    """Response headers."""

    body: bytes = b""
    """Raw response body."""


@runtime_checkable
class Transport(Protocol):
    """
    Sends a request to a push service.

    Implementations raise TransportError for timeouts, refused connections
    and non-2xx responses. They do not retry.
    """

    def send(self, request: PushRequest) -> PushResponse:
        """Deliver the request and return the response."""
        ...


class HttpxTransport:
    """Transport backed by a synchronous httpx client."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECS,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            timeout: Request timeout in seconds. Ignored when `client` is given.
            client: Existing client to use. The caller keeps ownership of it.
        """
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def send(self, request: PushRequest) -> PushResponse:
        """
        POST the request to the push service.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            )
            response.raise_for_status()
        except httpx.RequestError as exc:
            raise TransportError(f"Network error while connecting to {request.url}: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"HTTP error {exc.response.status_code}: {exc.response.text[:200]}",
                status_code=exc.response.status_code,
                body=exc.response.content,
            ) from exc

        logger.debug("Push service %s answered %d", request.url, response.status_code)
        return PushResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
