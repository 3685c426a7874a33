"""
Shared pytest fixtures for web_push tests.

Provides recipient key pairs used across encryption and dispatch tests.
"""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from web_push.encryption import generate_p256_keypair


@pytest.fixture
def recipient_key() -> ec.EllipticCurvePrivateKey:
    """Browser-side P-256 private key."""
    return generate_p256_keypair()


@pytest.fixture
def recipient_public_key(recipient_key: ec.EllipticCurvePrivateKey) -> ec.EllipticCurvePublicKey:
    """Browser-side P-256 public key, as published in a subscription."""
    return recipient_key.public_key()


@pytest.fixture
def fixed_salt() -> bytes:
    """Recognisable 16-byte salt."""
    return bytes(range(16))
