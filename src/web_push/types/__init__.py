"""Reusable type definitions for Web Push encryption."""

from .base import StrictBaseModel
from .byte_arrays import BaseBytes, Bytes12, Bytes16, Bytes32, Bytes65
from .exceptions import (
    CipherFailureError,
    ConfigurationError,
    InvalidLengthError,
    RandomnessUnavailableError,
    TransportError,
    UnsupportedCurveError,
    WebPushError,
)

__all__ = [
    # Core types
    "BaseBytes",
    "Bytes12",
    "Bytes16",
    "Bytes32",
    "Bytes65",
    "StrictBaseModel",
    # Exceptions
    "WebPushError",
    "UnsupportedCurveError",
    "RandomnessUnavailableError",
    "CipherFailureError",
    "InvalidLengthError",
    "ConfigurationError",
    "TransportError",
]
