"""
Key derivation for Web Push message encryption.

The aesgcm128 content encoding derives two values using HKDF-SHA256:
- Extract phase: PRK = HMAC-SHA256(salt, ikm=shared-secret)
- Expand phase: T(i) = HMAC-SHA256(PRK, T(i-1) || info || i)

The salt is 16 random bytes chosen by the sender and published in the
`Encryption` header, so the recipient can repeat the derivation.

The derived values are:
- content encryption key: 16 bytes, info "Content-Encoding: aesgcm128"
- nonce: 12 bytes, info "Content-Encoding: nonce"

References:
- https://tools.ietf.org/html/draft-thomson-http-encryption-01#section-3.2
- RFC 5869 (HKDF)
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Final

from web_push.types import Bytes12, Bytes16, Bytes32, InvalidLengthError

from .crypto import AES_KEY_SIZE, GCM_NONCE_SIZE

HASH_LENGTH: Final = hashlib.sha256().digest_size
"""SHA256 output size in bytes."""

MAX_HKDF_LENGTH: Final = 255 * HASH_LENGTH
"""Largest output HKDF-SHA256 can produce (RFC 5869 section 2.3)."""

CONTENT_ENCODING: Final = "aesgcm128"
"""Content coding named in the Content-Encoding header."""

INFO_PREFIX: Final = b"Content-Encoding: "
"""Prefix shared by every HKDF info string."""

SALT_SIZE: Final = 16
"""Size of the random salt in bytes."""


def content_encoding_info(base: str) -> bytes:
    """
    Build an HKDF info string.

    The draft this encoding follows does not terminate the string with
    a zero byte. Later drafts do.
    """
    return INFO_PREFIX + base.encode("ascii")


KEY_INFO: Final = content_encoding_info(CONTENT_ENCODING)
"""Info string for the content encryption key."""

NONCE_INFO: Final = content_encoding_info("nonce")
"""Info string for the nonce."""


def hkdf_expand(ikm: bytes, salt: bytes, info: bytes, length: int) -> bytes:
    """
    Run HKDF-SHA256 extract-then-expand.

    Args:
        ikm: Input keying material (the ECDH shared secret).
        salt: Extract salt. An empty salt is treated as HASH_LENGTH zero bytes.
        info: Context string binding the output to its purpose.
        length: Number of output bytes, at most 255 * 32.

    Returns:
        `length` bytes of output keying material.

    Raises:
        InvalidLengthError: If `length` is negative or exceeds MAX_HKDF_LENGTH.
    """
    if length < 0 or length > MAX_HKDF_LENGTH:
        raise InvalidLengthError(length, MAX_HKDF_LENGTH)

    # HKDF-Extract: PRK = HMAC-SHA256(salt, IKM).
    prk = hmac.new(salt or bytes(HASH_LENGTH), ikm, hashlib.sha256).digest()

    # HKDF-Expand: concatenate T(1) .. T(N) and truncate.
    okm = b""
    block = b""
    counter = 1
    while len(okm) < length:
        block = hmac.new(prk, block + info + bytes([counter]), hashlib.sha256).digest()
        okm += block
        counter += 1

    return okm[:length]


def derive_keys(secret: Bytes32, salt: Bytes16) -> tuple[Bytes16, Bytes12]:
    """
    Derive the content encryption key and nonce.

    Both values come from the same (secret, salt) pair and differ only in
    the info string, so the derivation is run once per value.

    Args:
        secret: 32-byte ECDH shared secret.
        salt: 16-byte salt from the Encryption header.

    Returns:
        Tuple of (key, nonce), 16 and 12 bytes.
    """
    if len(secret) != 32:
        raise ValueError(f"Secret must be 32 bytes, got {len(secret)}")
    if len(salt) != SALT_SIZE:
        raise ValueError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")

    key = hkdf_expand(bytes(secret), bytes(salt), KEY_INFO, AES_KEY_SIZE)
    nonce = hkdf_expand(bytes(secret), bytes(salt), NONCE_INFO, GCM_NONCE_SIZE)
    return Bytes16(key), Bytes12(nonce)
