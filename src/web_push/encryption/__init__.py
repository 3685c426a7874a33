"""
Web Push message encryption (aesgcm128 content encoding).

The module provides:
- P-256 key handling and ECDH key agreement
- HKDF-SHA256 key and nonce derivation
- AES-128-GCM payload encryption and decryption

References:
    - https://tools.ietf.org/html/draft-ietf-webpush-encryption-01
    - https://tools.ietf.org/html/draft-thomson-http-encryption-01
"""

from .crypto import (
    AES_KEY_SIZE,
    CURVE_NAME,
    GCM_NONCE_SIZE,
    GCM_TAG_SIZE,
    PRIVATE_KEY_SIZE,
    UNCOMPRESSED_PUBKEY_SIZE,
    aes_gcm_decrypt,
    aes_gcm_encrypt,
    b64url_decode,
    b64url_encode,
    derive_shared_secret,
    generate_p256_keypair,
    load_private_key,
    load_public_key,
    private_key_to_bytes,
    public_key_to_uncompressed,
    require_p256,
)
from .engine import (
    MAX_PAYLOAD_SIZE,
    PADDING_LENGTH_SIZE,
    RECORD_SIZE,
    Encrypted,
    RandomSource,
    decrypt,
    encrypt,
    encrypt_with_secret,
)
from .keys import (
    CONTENT_ENCODING,
    KEY_INFO,
    MAX_HKDF_LENGTH,
    NONCE_INFO,
    SALT_SIZE,
    content_encoding_info,
    derive_keys,
    hkdf_expand,
)

__all__ = [
    # Crypto
    "AES_KEY_SIZE",
    "CURVE_NAME",
    "GCM_NONCE_SIZE",
    "GCM_TAG_SIZE",
    "PRIVATE_KEY_SIZE",
    "UNCOMPRESSED_PUBKEY_SIZE",
    "aes_gcm_encrypt",
    "aes_gcm_decrypt",
    "b64url_encode",
    "b64url_decode",
    "derive_shared_secret",
    "generate_p256_keypair",
    "load_private_key",
    "load_public_key",
    "private_key_to_bytes",
    "public_key_to_uncompressed",
    "require_p256",
    # Keys
    "CONTENT_ENCODING",
    "KEY_INFO",
    "MAX_HKDF_LENGTH",
    "NONCE_INFO",
    "SALT_SIZE",
    "content_encoding_info",
    "derive_keys",
    "hkdf_expand",
    # Engine
    "MAX_PAYLOAD_SIZE",
    "PADDING_LENGTH_SIZE",
    "RECORD_SIZE",
    "Encrypted",
    "RandomSource",
    "encrypt",
    "encrypt_with_secret",
    "decrypt",
]
