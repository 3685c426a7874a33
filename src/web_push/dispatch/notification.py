"""
Notification Types.

A notification is one of two variants:

::

    Notification
        |
        +-- EncryptedNotification   --> payload encrypted for the browser key
        +-- GcmNotification         --> legacy JSON body, sent in the clear

The dispatcher matches on the variant to choose headers and body.
"""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.hazmat.primitives.asymmetric import ec

from web_push.config import DEFAULT_TTL
from web_push.encryption import b64url_decode, load_public_key, require_p256


def _check_ttl(ttl: int) -> None:
    if isinstance(ttl, bool) or not isinstance(ttl, int):
        raise TypeError(f"TTL must be an int, got {type(ttl).__name__}")
    if ttl < 0:
        raise ValueError(f"TTL must be non-negative, got {ttl}")


@dataclass(frozen=True, slots=True)
class EncryptedNotification:
    """
    Notification whose payload is encrypted for one browser.

    The browser publishes its P-256 key as the `p256dh` field of its
    push subscription.
    """

    endpoint: str
    """Push service URL for this subscription."""

    user_public_key: ec.EllipticCurvePublicKey
    """Recipient P-256 public key."""

    payload: bytes
    """Message bytes to encrypt."""

    ttl: int = DEFAULT_TTL
    """Seconds the push service may hold the message."""

    def __post_init__(self) -> None:
        require_p256(self.user_public_key)
        _check_ttl(self.ttl)

    @classmethod
    def from_base64(
        cls,
        endpoint: str,
        user_public_key: str,
        payload: bytes | str,
        ttl: int = DEFAULT_TTL,
    ) -> EncryptedNotification:
        """
        Build a notification from subscription fields.

        Args:
            endpoint: Push service URL.
            user_public_key: Base64url encoded uncompressed P-256 point.
            payload: Message bytes. Text is encoded as UTF-8.
            ttl: Seconds the push service may hold the message.
        """
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return cls(
            endpoint=endpoint,
            user_public_key=load_public_key(b64url_decode(user_public_key)),
            payload=payload,
            ttl=ttl,
        )


@dataclass(frozen=True, slots=True)
class GcmNotification:
    """
    Legacy Google Cloud Messaging notification.

    The body is opaque JSON text, sent without encryption.
    """

    endpoint: str
    """GCM send URL."""

    body: str
    """JSON request body."""

    ttl: int = DEFAULT_TTL
    """Seconds the push service may hold the message."""

    def __post_init__(self) -> None:
        _check_ttl(self.ttl)


Notification = EncryptedNotification | GcmNotification
"""Union of all notification variants for pattern matching dispatch."""
