"""
MicroCrypt - Password-based string encryption with pure Python AES-256.

Self-contained AES-256, CBC mode and SHA-256, composed into two
password-based message formats.

Usage:
    from microcrypt import encrypt_string, decrypt_string

    # v1: hex text with salted key and embedded checksum (default)
    encrypted = encrypt_string("password", "secret note")
    decrypted = decrypt_string("password", encrypted)

    # v2: base64 text with iterated-hash key
    encrypted = encrypt_string("password", "secret note", version=2)

    # Typed result instead of message strings
    result = decrypt_message("password", encrypted)
    if result.ok:
        print(result.plaintext)

Security:
    CBC padding is the only integrity check in v2; v1 adds a SHA-256
    checksum inside the ciphertext. Neither format is authenticated
    encryption.
"""

__version__ = "0.1.0"
__license__ = "CC0-1.0"

from microcrypt.aes import AES256, decrypt_block, encrypt_block, expand_key
from microcrypt.cbc import CbcDecryptor, CbcEncryptor, cbc_decrypt, cbc_encrypt
from microcrypt.core import (
    DecryptResult,
    MicroCrypt,
    decrypt_message,
    decrypt_string,
    decrypt_v1,
    decrypt_v2,
    detect_version,
    encrypt_string,
    encrypt_v1,
    encrypt_v2,
)
from microcrypt.errors import (
    EncodingError,
    ErrorKind,
    FormatError,
    IntegrityError,
    MicroCryptError,
    PaddingError,
)
from microcrypt.kdf import derive_key_v1, derive_key_v2
from microcrypt.sha256 import HashState, sha256

__all__ = [
    # Messages
    "encrypt_string",
    "decrypt_string",
    "decrypt_message",
    "encrypt_v1",
    "decrypt_v1",
    "encrypt_v2",
    "decrypt_v2",
    "detect_version",
    "DecryptResult",
    "MicroCrypt",
    # Primitives
    "AES256",
    "expand_key",
    "encrypt_block",
    "decrypt_block",
    "CbcEncryptor",
    "CbcDecryptor",
    "cbc_encrypt",
    "cbc_decrypt",
    "HashState",
    "sha256",
    # Key derivation
    "derive_key_v1",
    "derive_key_v2",
    # Errors
    "ErrorKind",
    "MicroCryptError",
    "FormatError",
    "PaddingError",
    "IntegrityError",
    "EncodingError",
]
