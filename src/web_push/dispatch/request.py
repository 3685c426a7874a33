"""
Request assembly for push delivery.

Turns a notification into the HTTP request a push service expects.
No network I/O happens here; the result is handed to a transport.

Encrypted path headers::

    TTL: <seconds>
    Content-Type: application/octet-stream
    Content-Encoding: aesgcm128
    Encryption: keyid=p256dh;salt=<base64url salt>
    Encryption-Key: keyid=p256dh;dh=<base64url uncompressed ephemeral key>

Legacy GCM path headers::

    TTL: <seconds>
    Authorization: key=<api key>
    Accept: application/json
    Content-Type: application/json
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Final

from web_push.encryption import CONTENT_ENCODING, RandomSource, b64url_encode, encrypt
from web_push.types import ConfigurationError

from .notification import EncryptedNotification, GcmNotification, Notification

KEY_ID: Final = "p256dh"
"""Key identifier linking the Encryption and Encryption-Key headers."""

OCTET_STREAM: Final = "application/octet-stream"
"""Content type of an encrypted body."""

APPLICATION_JSON: Final = "application/json"
"""Content type of a legacy GCM body."""


@dataclass(frozen=True, slots=True)
class PushRequest:
    """An HTTP request ready for a transport."""

    url: str
    """Target URL."""

    headers: dict[str, str] = field(default_factory=dict)
    """Header names and values, sent verbatim."""

    body: bytes = b""
    """Raw request body."""

    method: str = "POST"
    """HTTP method. Push delivery always uses POST."""


def encryption_header(salt: bytes) -> str:
    """Value of the Encryption header for a salt."""
    return f"keyid={KEY_ID};salt={b64url_encode(salt)}"


def encryption_key_header(public_key: bytes) -> str:
    """Value of the Encryption-Key header for an uncompressed public key."""
    return f"keyid={KEY_ID};dh={b64url_encode(public_key)}"


def build_request(
    notification: Notification,
    *,
    gcm_api_key: str | None = None,
    random_bytes: RandomSource = os.urandom,
) -> PushRequest:
    """
    Build the delivery request for a notification.

    Args:
        notification: The notification to deliver.
        gcm_api_key: API key for the legacy GCM path.
        random_bytes: Secure random source for the encryption salt.

    Returns:
        The request to hand to a transport.

    Raises:
        ConfigurationError: If a GCM notification is built without an API key.
        UnsupportedCurveError, RandomnessUnavailableError, CipherFailureError:
            Propagated unchanged from encryption.
    """
    match notification:
        case GcmNotification(endpoint=endpoint, body=body, ttl=ttl):
            if not gcm_api_key:
                raise ConfigurationError("GCM API key required for using Google Cloud Messaging")

            headers = {
                "TTL": str(ttl),
                "Authorization": f"key={gcm_api_key}",
                "Accept": APPLICATION_JSON,
                "Content-Type": APPLICATION_JSON,
            }
            return PushRequest(url=endpoint, headers=headers, body=body.encode("utf-8"))

        case EncryptedNotification(
            endpoint=endpoint, user_public_key=key, payload=payload, ttl=ttl
        ):
            encrypted = encrypt(key, payload, random_bytes=random_bytes)

            headers = {
                "TTL": str(ttl),
                "Content-Type": OCTET_STREAM,
                "Content-Encoding": CONTENT_ENCODING,
                "Encryption": encryption_header(encrypted.salt),
                "Encryption-Key": encryption_key_header(encrypted.public_key),
            }
            return PushRequest(url=endpoint, headers=headers, body=encrypted.ciphertext)

        case _:
            raise TypeError(f"Unsupported notification type: {type(notification).__name__}")
