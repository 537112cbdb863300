"""
MicroCrypt AES - Pure Python AES-256 block cipher.

Implements the 256-bit key schedule (240-byte expanded key) and the
14-round encrypt/decrypt transforms on single 16-byte blocks. Chaining
is left to microcrypt.cbc.

Example:
    >>> from microcrypt.aes import AES256
    >>> codebook = AES256(bytes(range(32)))
    >>> block = codebook.encrypt(bytes.fromhex("00112233445566778899aabbccddeeff"))
    >>> block.hex()
    '8ea2b7ca516745bfeafc49904b496089'
"""

from typing import Dict, List

KEY_SIZE = 32
BLOCK_SIZE = 16
EXPANDED_KEY_SIZE = 240
ROUNDS = 14

SBOX = bytes.fromhex(
    "637c777bf26b6fc53001672bfed7ab76ca82c97dfa5947f0add4a2af9ca472c0"
    "b7fd9326363ff7cc34a5e5f171d8311504c723c31896059a071280e2eb27b275"
    "09832c1a1b6e5aa0523bd6b329e32f8453d100ed20fcb15b6acbbe394a4c58cf"
    "d0efaafb434d338545f9027f503c9fa851a3408f929d38f5bcb6da2110fff3d2"
    "cd0c13ec5f974417c4a77e3d645d197360814fdc222a908846eeb814de5e0bdb"
    "e0323a0a4906245cc2d3ac629195e479e7c8376d8dd54ea96c56f4ea657aae08"
    "ba78252e1ca6b4c6e8dd741f4bbd8b8a703eb5664803f60e613557b986c11d9e"
    "e1f8981169d98e949b1e87e9ce5528df8ca1890dbfe6426841992d0fb054bb16"
)


def _invert(table: bytes) -> bytes:
    inverse = bytearray(256)
    for i, v in enumerate(table):
        inverse[v] = i
    return bytes(inverse)


INV_SBOX = _invert(SBOX)

# Source index for each output position of ShiftRows / InvShiftRows
# (column-major 4x4 state, row r rotated by r).
_SHIFT_ROWS = (0, 5, 10, 15, 4, 9, 14, 3, 8, 13, 2, 7, 12, 1, 6, 11)
_INV_SHIFT_ROWS = (0, 13, 10, 7, 4, 1, 14, 11, 8, 5, 2, 15, 12, 9, 6, 3)


def gf_mul(a: int, b: int) -> int:
    """
    Multiply two bytes in GF(2^8) modulo x^8 + x^4 + x^3 + x + 1 (0x11B).

    Args:
        a: First factor (0-255)
        b: Second factor (0-255)

    Returns:
        Product as a byte
    """
    result = 0
    while a:
        if a & 1:
            result ^= b
        a >>= 1
        b = (b << 1) ^ (0x1B if b & 0x80 else 0)
    return result & 0xFF


# Lookup rows for the fixed MixColumns coefficients, built once.
_MUL: Dict[int, bytes] = {
    c: bytes(gf_mul(c, x) for x in range(256)) for c in (2, 3, 9, 11, 13, 14)
}


def expand_key(key: bytes) -> bytes:
    """
    Expand a 32-byte key into the 240-byte AES-256 key schedule.

    Args:
        key: 32-byte key

    Returns:
        240-byte expanded key (15 round keys of 16 bytes)

    Raises:
        ValueError: If key is not 32 bytes
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")

    expanded = bytearray(EXPANDED_KEY_SIZE)
    expanded[:KEY_SIZE] = key

    for i in range(KEY_SIZE, EXPANDED_KEY_SIZE, 4):
        word = expanded[i - 4 : i]
        if i % 16 == 0:
            if i % 32 == 0:
                word = word[1:] + word[:1]
            word = bytearray(SBOX[b] for b in word)
            if i % 32 == 0:
                word[0] ^= 1 << (i // 32 - 1)
        for j in range(4):
            expanded[i + j] = word[j] ^ expanded[i + j - KEY_SIZE]

    return bytes(expanded)


def _check_block(block: bytes) -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Block must be {BLOCK_SIZE} bytes, got {len(block)}")


def _mix_column(state: bytearray, j: int, coeffs: List[bytes]) -> None:
    m0, m1, m2, m3 = coeffs
    s0, s1, s2, s3 = state[j : j + 4]
    state[j] = m0[s0] ^ m1[s1] ^ m2[s2] ^ m3[s3]
    state[j + 1] = m3[s0] ^ m0[s1] ^ m1[s2] ^ m2[s3]
    state[j + 2] = m2[s0] ^ m3[s1] ^ m0[s2] ^ m1[s3]
    state[j + 3] = m1[s0] ^ m2[s1] ^ m3[s2] ^ m0[s3]


_IDENTITY = bytes(range(256))
_MIX = [_MUL[2], _MUL[3], _IDENTITY, _IDENTITY]
_INV_MIX = [_MUL[14], _MUL[11], _MUL[13], _MUL[9]]


def encrypt_block(expanded_key: bytes, block: bytes) -> bytes:
    """
    Encrypt one 16-byte block.

    Args:
        expanded_key: 240-byte schedule from expand_key()
        block: 16-byte plaintext block

    Returns:
        16-byte ciphertext block
    """
    _check_block(block)
    state = bytearray(b ^ k for b, k in zip(block, expanded_key[:BLOCK_SIZE]))

    for rnd in range(1, ROUNDS + 1):
        state = bytearray(SBOX[state[src]] for src in _SHIFT_ROWS)
        if rnd < ROUNDS:
            for j in range(0, BLOCK_SIZE, 4):
                _mix_column(state, j, _MIX)
        round_key = expanded_key[BLOCK_SIZE * rnd : BLOCK_SIZE * (rnd + 1)]
        for j in range(BLOCK_SIZE):
            state[j] ^= round_key[j]

    return bytes(state)


def decrypt_block(expanded_key: bytes, block: bytes) -> bytes:
    """
    Decrypt one 16-byte block.

    Args:
        expanded_key: 240-byte schedule from expand_key()
        block: 16-byte ciphertext block

    Returns:
        16-byte plaintext block
    """
    _check_block(block)
    last = EXPANDED_KEY_SIZE - BLOCK_SIZE
    state = bytearray(b ^ k for b, k in zip(block, expanded_key[last:]))

    for rnd in range(ROUNDS - 1, -1, -1):
        state = bytearray(INV_SBOX[state[src]] for src in _INV_SHIFT_ROWS)
        round_key = expanded_key[BLOCK_SIZE * rnd : BLOCK_SIZE * (rnd + 1)]
        for j in range(BLOCK_SIZE):
            state[j] ^= round_key[j]
        if rnd > 0:
            for j in range(0, BLOCK_SIZE, 4):
                _mix_column(state, j, _INV_MIX)

    return bytes(state)


class AES256:
    """
    AES-256 codebook bound to one key.

    The key schedule is computed once at construction; encrypt() and
    decrypt() are pure functions of the block afterwards.
    """

    block_size = BLOCK_SIZE
    key_size = KEY_SIZE

    def __init__(self, key: bytes):
        self._expanded_key = expand_key(key)

    @property
    def expanded_key(self) -> bytes:
        return self._expanded_key

    def encrypt(self, block: bytes) -> bytes:
        return encrypt_block(self._expanded_key, block)

    def decrypt(self, block: bytes) -> bytes:
        return decrypt_block(self._expanded_key, block)
