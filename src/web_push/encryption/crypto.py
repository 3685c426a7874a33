"""
Cryptographic primitives for Web Push message encryption.

Web Push (aesgcm128 content encoding) uses:
- P-256 (secp256r1) ECDH for key agreement
- AES-128-GCM for payload encryption
- SHA256 for key derivation (see keys.py)

Wire format notes:
- Public keys travel as 65-byte uncompressed points (0x04 || x || y)
- The ECDH shared secret is the 32-byte x-coordinate of the agreed point
- GCM tag is 16 bytes, appended to ciphertext
- Keys and salts are base64url encoded without padding in headers

References:
- https://tools.ietf.org/html/draft-ietf-webpush-encryption-01
- https://tools.ietf.org/html/draft-thomson-http-encryption-01
"""

from __future__ import annotations

import base64
from typing import Final

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from web_push.types import Bytes12, Bytes16, Bytes32, Bytes65, UnsupportedCurveError

CURVE_NAME: Final = "secp256r1"
"""The only curve the scheme allows. Also known as P-256 and prime256v1."""

UNCOMPRESSED_PUBKEY_SIZE: Final = 65
"""Uncompressed P-256 public key: 0x04 + 32-byte x + 32-byte y."""

PRIVATE_KEY_SIZE: Final = 32
"""P-256 private scalar size in bytes."""

AES_KEY_SIZE: Final = 16
"""AES-128 key size in bytes."""

GCM_NONCE_SIZE: Final = 12
"""AES-GCM nonce size in bytes."""

GCM_TAG_SIZE: Final = 16
"""AES-GCM authentication tag size in bytes."""


def require_p256(key: ec.EllipticCurvePublicKey | ec.EllipticCurvePrivateKey) -> None:
    """Raise UnsupportedCurveError unless the key lives on P-256."""
    if not isinstance(key, (ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey)):
        raise UnsupportedCurveError(f"Expected an elliptic curve key, got {type(key).__name__}")
    if not isinstance(key.curve, ec.SECP256R1):
        raise UnsupportedCurveError(
            f"Key must be on {CURVE_NAME}, got {key.curve.name}",
            curve_name=key.curve.name,
        )


def generate_p256_keypair() -> ec.EllipticCurvePrivateKey:
    """
    Generate a new P-256 key pair.

    Used to create the ephemeral sender key for every encryption.
    The public half is available via `private_key.public_key()`.
    """
    return ec.generate_private_key(ec.SECP256R1())


def load_public_key(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Parse an X9.62 encoded P-256 public key.

    Args:
        data: 65-byte uncompressed or 33-byte compressed point.

    Returns:
        The public key object.

    Raises:
        UnsupportedCurveError: If the bytes do not describe a point on P-256.
    """
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), bytes(data))
    except ValueError as exc:
        raise UnsupportedCurveError(f"Not a valid {CURVE_NAME} point: {exc}") from exc


def load_private_key(scalar: bytes) -> ec.EllipticCurvePrivateKey:
    """Build a P-256 private key from its 32-byte big-endian scalar."""
    if len(scalar) != PRIVATE_KEY_SIZE:
        raise ValueError(f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(scalar)}")
    return ec.derive_private_key(int.from_bytes(scalar, "big"), ec.SECP256R1())


def private_key_to_bytes(private_key: ec.EllipticCurvePrivateKey) -> Bytes32:
    """Return the 32-byte big-endian private scalar."""
    require_p256(private_key)
    value = private_key.private_numbers().private_value
    return Bytes32(value.to_bytes(PRIVATE_KEY_SIZE, "big"))


def public_key_to_uncompressed(public_key: ec.EllipticCurvePublicKey) -> Bytes65:
    """
    Encode a P-256 public key as an uncompressed point.

    Returns:
        65-byte uncompressed public key (0x04 || x || y).
    """
    require_p256(public_key)
    return Bytes65(
        public_key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint,
        )
    )


def derive_shared_secret(
    private_key: ec.EllipticCurvePrivateKey,
    public_key: ec.EllipticCurvePublicKey,
) -> Bytes32:
    """
    Perform P-256 ECDH key agreement.

    Both parties compute the same shared secret from their private key
    and the other party's public key.

    The shared secret is the x-coordinate of the point obtained by
    multiplying the public point by the private scalar.

    Args:
        private_key: Our P-256 private key.
        public_key: The other party's P-256 public key.

    Returns:
        32-byte shared secret.

    Raises:
        UnsupportedCurveError: If either key is not on P-256.
    """
    require_p256(private_key)
    require_p256(public_key)
    return Bytes32(private_key.exchange(ec.ECDH(), public_key))


def aes_gcm_encrypt(key: Bytes16, nonce: Bytes12, plaintext: bytes) -> bytes:
    """
    Encrypt using AES-128-GCM.

    No associated data is used by the aesgcm128 content encoding.

    Args:
        key: 16-byte content encryption key.
        nonce: 12-byte nonce.
        plaintext: Padded record to encrypt.

    Returns:
        Ciphertext with 16-byte authentication tag appended.
    """
    if len(key) != AES_KEY_SIZE:
        raise ValueError(f"Key must be {AES_KEY_SIZE} bytes, got {len(key)}")
    if len(nonce) != GCM_NONCE_SIZE:
        raise ValueError(f"Nonce must be {GCM_NONCE_SIZE} bytes, got {len(nonce)}")

    aesgcm = AESGCM(bytes(key))
    return aesgcm.encrypt(bytes(nonce), plaintext, None)


def aes_gcm_decrypt(key: Bytes16, nonce: Bytes12, ciphertext: bytes) -> bytes:
    """
    Decrypt using AES-128-GCM.

    Verifies the authentication tag and decrypts if valid.

    Args:
        key: 16-byte content encryption key.
        nonce: 12-byte nonce.
        ciphertext: Ciphertext with 16-byte auth tag.

    Returns:
        Decrypted plaintext.

    Raises:
        cryptography.exceptions.InvalidTag: If authentication fails.
    """
    if len(key) != AES_KEY_SIZE:
        raise ValueError(f"Key must be {AES_KEY_SIZE} bytes, got {len(key)}")
    if len(nonce) != GCM_NONCE_SIZE:
        raise ValueError(f"Nonce must be {GCM_NONCE_SIZE} bytes, got {len(nonce)}")

    aesgcm = AESGCM(bytes(key))
    return aesgcm.decrypt(bytes(nonce), ciphertext, None)


def b64url_encode(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(text: str) -> bytes:
    """Decode base64url text, with or without padding."""
    stripped = text.strip().rstrip("=")
    return base64.urlsafe_b64decode(stripped + "=" * (-len(stripped) % 4))
