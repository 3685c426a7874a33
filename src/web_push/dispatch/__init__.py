"""
Web Push delivery.

The module provides:
- Notification variants (encrypted and legacy GCM)
- Request assembly with the aesgcm128 headers
- A transport protocol with an httpx implementation
- The push service tying them together
"""

from .notification import EncryptedNotification, GcmNotification, Notification
from .request import (
    APPLICATION_JSON,
    KEY_ID,
    OCTET_STREAM,
    PushRequest,
    build_request,
    encryption_header,
    encryption_key_header,
)
from .service import PushService
from .transport import HttpxTransport, PushResponse, Transport

__all__ = [
    # Notifications
    "EncryptedNotification",
    "GcmNotification",
    "Notification",
    # Requests
    "APPLICATION_JSON",
    "KEY_ID",
    "OCTET_STREAM",
    "PushRequest",
    "build_request",
    "encryption_header",
    "encryption_key_header",
    # Transport
    "HttpxTransport",
    "PushResponse",
    "Transport",
    # Service
    "PushService",
]
