"""
Push service.

Ties request assembly to a transport:

::

    Notification --> build_request --> PushRequest --> Transport --> PushResponse

The service holds configuration only. It keeps no per-message state, so
one instance can be shared across threads.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, Future
from types import TracebackType

from web_push.config import PushServiceConfig
from web_push.encryption import RandomSource

from .notification import EncryptedNotification, Notification
from .request import PushRequest, build_request
from .transport import HttpxTransport, PushResponse, Transport

logger = logging.getLogger(__name__)


class PushService:
    """Encrypts notifications and delivers them to push services."""

    def __init__(
        self,
        config: PushServiceConfig | None = None,
        transport: Transport | None = None,
        random_bytes: RandomSource = os.urandom,
    ) -> None:
        """
        Args:
            config: Service configuration. Defaults to no GCM key.
            transport: Delivery backend. Defaults to an HttpxTransport
                using the configured timeout, closed by `close()`. A
                supplied transport stays open; the caller owns it.
            random_bytes: Secure random source for encryption salts.
        """
        self.config = config if config is not None else PushServiceConfig()
        self._owned_transport: HttpxTransport | None = None
        if transport is None:
            transport = self._owned_transport = HttpxTransport(timeout=self.config.timeout_secs)
        self.transport = transport
        self._random_bytes = random_bytes

    def build_request(self, notification: Notification) -> PushRequest:
        """Build the delivery request using the configured GCM key."""
        return build_request(
            notification,
            gcm_api_key=self.config.gcm_api_key,
            random_bytes=self._random_bytes,
        )

    def send(self, notification: Notification) -> PushResponse:
        """
        Encrypt (if needed) and deliver a notification.

        Raises:
            ConfigurationError: GCM notification without an API key.
            TransportError: Delivery failed.
            UnsupportedCurveError, RandomnessUnavailableError, CipherFailureError:
                Encryption failed.
        """
        request = self.build_request(notification)

        kind = "encrypted" if isinstance(notification, EncryptedNotification) else "gcm"
        logger.debug(
            "Sending %s notification to %s (ttl=%d, %d body bytes)",
            kind,
            request.url,
            notification.ttl,
            len(request.body),
        )

        response = self.transport.send(request)
        logger.info("Delivered %s notification to %s: %d", kind, request.url, response.status_code)
        return response

    def send_async(self, notification: Notification, executor: Executor) -> Future[PushResponse]:
        """
        Deliver a notification on a caller-supplied executor.

        The caller sizes and owns the executor. Errors are raised from
        `Future.result()`.
        """
        return executor.submit(self.send, notification)

    def close(self) -> None:
        """Close the transport if this service created it."""
        if self._owned_transport is not None:
            self._owned_transport.close()

    def __enter__(self) -> PushService:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
