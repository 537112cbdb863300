"""
MicroCrypt KDF - Password to 32-byte key derivation.

Two variants exist, one per message format, and they are not
interchangeable:

    v1: SHA-256(salt || UTF-16BE(password)), single pass
    v2: SHA-256 iterated V2_ITERATIONS times over UTF-8(password), no salt

The v2 construction is weaker than v1 (no salt, few iterations). It is kept
only so that existing v2 messages stay decodable.
"""

import struct
from typing import Sequence

from microcrypt.encoding import utf8_encode, utf16be_encode
from microcrypt.sha256 import HashState

KEY_SIZE = 32
V2_ITERATIONS = 100


def digest_to_bytes(words: Sequence[int]) -> bytes:
    """Lay out eight 32-bit digest words as 32 big-endian bytes."""
    return struct.pack(">8I", *words)


def derive_key_v1(password: str, salt: bytes) -> bytes:
    """
    Derive the v1 message key.

    Args:
        password: Password; each UTF-16 code unit contributes two bytes
        salt: Random salt stored with the message

    Returns:
        32-byte key
    """
    state = HashState()
    state.append(salt)
    state.append(utf16be_encode(password))
    state.finish()
    return digest_to_bytes(state.words())


def derive_key_v2(password: str, iterations: int = V2_ITERATIONS) -> bytes:
    """
    Derive the v2 message key by iterated hashing.

    Args:
        password: Password, encoded as UTF-8
        iterations: Number of hash passes (default: 100)

    Returns:
        32-byte key

    Raises:
        EncodingError: If the password cannot be encoded as UTF-8
    """
    if iterations < 1:
        raise ValueError(f"Iterations must be positive, got {iterations}")

    key = utf8_encode(password)
    for _ in range(iterations):
        state = HashState()
        state.append(key)
        state.finish()
        key = digest_to_bytes(state.words())
    return key
