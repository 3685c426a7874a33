"""
Web Push payload encryption.

Every call to `encrypt` is independent:

1. Generate an ephemeral P-256 key pair.
2. ECDH with the recipient's public key gives a 32-byte shared secret.
3. Draw a fresh 16-byte salt.
4. HKDF derives a 16-byte key and a 12-byte nonce from (secret, salt).
5. AES-128-GCM encrypts a zero padding-length byte followed by the payload.

The recipient needs the ephemeral public key and the salt to repeat the
derivation. Both are returned in `Encrypted` and travel in HTTP headers.

Neither the ephemeral key pair nor the salt is ever reused. GCM loses its
authentication guarantee if a (key, nonce) pair repeats.
"""

from __future__ import annotations

import os
from typing import Annotated, Callable, Final

from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import PlainSerializer

from web_push.types import (
    Bytes16,
    Bytes32,
    Bytes65,
    CipherFailureError,
    RandomnessUnavailableError,
    StrictBaseModel,
)

from .crypto import (
    GCM_TAG_SIZE,
    aes_gcm_decrypt,
    aes_gcm_encrypt,
    derive_shared_secret,
    generate_p256_keypair,
    load_public_key,
    public_key_to_uncompressed,
    require_p256,
)
from .keys import SALT_SIZE, derive_keys

RandomSource = Callable[[int], bytes]
"""Returns the requested number of cryptographically secure random bytes."""

PADDING_LENGTH_SIZE: Final = 1
"""Size of the padding-length prefix in each record."""

RECORD_SIZE: Final = 4096
"""Default record size for aesgcm128. The whole message is one record."""

MAX_PAYLOAD_SIZE: Final = RECORD_SIZE - PADDING_LENGTH_SIZE - GCM_TAG_SIZE
"""Largest payload that still fits in a single record."""

HexBytes = Annotated[
    bytes, PlainSerializer(lambda b: b.hex(), return_type=str, when_used="json")
]
"""Variable-length bytes that serialize to hex in JSON, like the fixed-length types."""


class Encrypted(StrictBaseModel):
    """
    Result of encrypting a payload for one recipient.

    Everything here is safe to send over the wire.
    """

    public_key: Bytes65
    """Ephemeral sender public key (uncompressed point), not the recipient's."""

    salt: Bytes16
    """Random salt used for key derivation."""

    ciphertext: HexBytes
    """Encrypted record with the 16-byte GCM tag appended."""

    def ec_public_key(self) -> ec.EllipticCurvePublicKey:
        """Load the ephemeral public key as a key object."""
        return load_public_key(self.public_key)


def _recipient_key(user_public_key: ec.EllipticCurvePublicKey | bytes) -> ec.EllipticCurvePublicKey:
    """Accept a key object or its X9.62 encoding and check the curve."""
    if isinstance(user_public_key, (bytes, bytearray)):
        return load_public_key(user_public_key)
    require_p256(user_public_key)
    return user_public_key


def _random_salt(random_bytes: RandomSource) -> Bytes16:
    """Draw a fresh salt, mapping entropy failures to RandomnessUnavailableError."""
    try:
        data = random_bytes(SALT_SIZE)
    except (OSError, NotImplementedError) as exc:
        raise RandomnessUnavailableError(f"Secure random source failed: {exc}") from exc

    if len(data) != SALT_SIZE:
        raise RandomnessUnavailableError(
            f"Secure random source returned {len(data)} bytes, expected {SALT_SIZE}"
        )
    return Bytes16(data)


def _wipe(buffer: bytearray) -> None:
    """Overwrite key material in place."""
    buffer[:] = bytes(len(buffer))


def encrypt_with_secret(secret: Bytes32 | bytearray, salt: Bytes16, payload: bytes) -> bytes:
    """
    Encrypt a payload under an already agreed shared secret.

    This is the deterministic half of `encrypt`: identical inputs give
    identical ciphertext. Callers must never reuse a salt with the same
    secret.

    Args:
        secret: 32-byte ECDH shared secret.
        salt: 16-byte salt.
        payload: Message bytes.

    Returns:
        Ciphertext of length len(payload) + 1 + 16.

    Raises:
        CipherFailureError: If AES-GCM rejects its parameters.
    """
    key, nonce = derive_keys(secret, salt)

    # A single record: padding-length byte (always zero, no padding) then data.
    record = bytes(PADDING_LENGTH_SIZE) + bytes(payload)

    try:
        return aes_gcm_encrypt(key, nonce, record)
    except (ValueError, OverflowError) as exc:
        raise CipherFailureError(f"AES-GCM encryption failed: {exc}") from exc


def encrypt(
    user_public_key: ec.EllipticCurvePublicKey | bytes,
    payload: bytes,
    *,
    random_bytes: RandomSource = os.urandom,
) -> Encrypted:
    """
    Encrypt a payload for the holder of `user_public_key`.

    Args:
        user_public_key: Recipient P-256 public key, or its X9.62 encoding.
        payload: Message bytes, at most MAX_PAYLOAD_SIZE.
        random_bytes: Secure random source used for the salt.

    Returns:
        The ephemeral public key, the salt and the ciphertext.

    Raises:
        UnsupportedCurveError: If the recipient key is not on P-256.
        RandomnessUnavailableError: If no salt could be drawn.
        CipherFailureError: If AES-GCM rejects its parameters.
    """
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(f"Payload must be at most {MAX_PAYLOAD_SIZE} bytes, got {len(payload)}")

    recipient = _recipient_key(user_public_key)

    ephemeral = generate_p256_keypair()
    public_key = public_key_to_uncompressed(ephemeral.public_key())
    secret = bytearray(derive_shared_secret(ephemeral, recipient))
    del ephemeral

    try:
        salt = _random_salt(random_bytes)
        ciphertext = encrypt_with_secret(secret, salt, payload)
    finally:
        _wipe(secret)

    return Encrypted(public_key=public_key, salt=salt, ciphertext=ciphertext)


def decrypt(private_key: ec.EllipticCurvePrivateKey, encrypted: Encrypted) -> bytes:
    """
    Decrypt a message on the recipient side.

    Repeats the sender's derivation with our private key and the
    ephemeral public key, then strips the padding.

    Args:
        private_key: Recipient P-256 private key.
        encrypted: Message produced by `encrypt`.

    Returns:
        The original payload.

    Raises:
        cryptography.exceptions.InvalidTag: If the ciphertext was tampered with
            or was not encrypted for this key.
        ValueError: If the decrypted record has malformed padding.
    """
    secret = bytearray(derive_shared_secret(private_key, encrypted.ec_public_key()))
    try:
        key, nonce = derive_keys(secret, encrypted.salt)
    finally:
        _wipe(secret)

    record = aes_gcm_decrypt(key, nonce, encrypted.ciphertext)
    if len(record) < PADDING_LENGTH_SIZE:
        raise ValueError("Record is missing its padding-length byte")

    pad = record[0]
    start = PADDING_LENGTH_SIZE + pad
    if len(record) < start or any(record[PADDING_LENGTH_SIZE:start]):
        raise ValueError(f"Invalid record padding of length {pad}")

    return record[start:]
