"""
MicroCrypt CBC - Streaming cipher block chaining over AES-256.

Sessions buffer input into 16-byte blocks and hand finished blocks to an
emit callback, synchronously and in order. Padding is PKCS#7 style: the
pad value is 16 minus the buffered length, and block-aligned input still
gets a full block of 16s.

A session runs in one direction only and must not be used after finish().

Example:
    >>> out = []
    >>> enc = CbcEncryptor(key, iv)
    >>> enc.update(b"attack at dawn", out.append)
    >>> enc.finish(out.append)
    >>> ciphertext = b"".join(out)
"""

from typing import Callable, Optional

from microcrypt.aes import BLOCK_SIZE, decrypt_block, encrypt_block, expand_key

IV_SIZE = BLOCK_SIZE

Emit = Callable[[bytes], None]


class _CbcSession:
    """State shared by both directions: expanded key, input buffer, chaining value."""

    def __init__(self, key: bytes, iv: bytes):
        if len(iv) != IV_SIZE:
            raise ValueError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
        self._key = expand_key(key)
        self._block = bytearray(BLOCK_SIZE)
        self._block_used = 0
        self._last = bytes(iv)
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def chaining_value(self) -> bytes:
        """Last ciphertext block produced or consumed (the IV before any block)."""
        return self._last

    def _check_open(self) -> None:
        if self._finished:
            raise RuntimeError("CBC session already finished - create a new one")

    def _feed(self, data: bytes, on_block: Callable[[bytes], None]) -> None:
        for byte in bytes(data):
            self._block[self._block_used] = byte
            self._block_used += 1
            if self._block_used == BLOCK_SIZE:
                self._block_used = 0
                on_block(bytes(self._block))


class CbcEncryptor(_CbcSession):
    """CBC encryption session."""

    def update(self, data: bytes, emit: Emit) -> None:
        """
        Encrypt data, emitting each completed 16-byte ciphertext block.

        Args:
            data: Plaintext bytes (any length)
            emit: Called once per ciphertext block
        """
        self._check_open()

        def on_block(block: bytes) -> None:
            mixed = bytes(a ^ b for a, b in zip(self._last, block))
            self._last = encrypt_block(self._key, mixed)
            emit(self._last)

        self._feed(data, on_block)

    def finish(self, emit: Emit) -> None:
        """Pad the buffered tail and emit the final block."""
        self._check_open()
        pad = BLOCK_SIZE - self._block_used
        self.update(bytes([pad]) * pad, emit)
        self._finished = True


class CbcDecryptor(_CbcSession):
    """
    CBC decryption session.

    Each decrypted block is held back until the next ciphertext block
    arrives, because only the true final block carries padding.
    """

    def __init__(self, key: bytes, iv: bytes):
        super().__init__(key, iv)
        self._pending: Optional[bytes] = None

    def update(self, data: bytes, emit: Emit) -> None:
        """
        Decrypt data, emitting every plaintext block except the newest.

        Args:
            data: Ciphertext bytes (any length)
            emit: Called once per released plaintext block
        """
        self._check_open()

        def on_block(block: bytes) -> None:
            if self._pending is not None:
                emit(self._pending)
                self._pending = None
            decrypted = decrypt_block(self._key, block)
            self._pending = bytes(a ^ b for a, b in zip(decrypted, self._last))
            self._last = block

        self._feed(data, on_block)

    def finish(self, emit: Emit) -> bool:
        """
        Validate and strip padding from the held-back block.

        Returns:
            False on a partial trailing block or a pad byte outside [1, 16],
            True otherwise (an empty message is valid)
        """
        self._check_open()
        self._finished = True
        if self._block_used > 0:
            return False
        if self._pending is None:
            return True

        pending, self._pending = self._pending, None
        pad = pending[-1]
        if pad == 0 or pad > BLOCK_SIZE:
            return False

        if pad < BLOCK_SIZE:
            emit(pending[: BLOCK_SIZE - pad])
        return True


def cbc_encrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    """
    One-shot CBC encryption with padding.

    Args:
        key: 32-byte AES key
        iv: 16-byte initialization vector
        data: Plaintext

    Returns:
        Ciphertext (a non-zero multiple of 16 bytes)
    """
    out = []
    session = CbcEncryptor(key, iv)
    session.update(data, out.append)
    session.finish(out.append)
    return b"".join(out)


def cbc_decrypt(key: bytes, iv: bytes, data: bytes) -> Optional[bytes]:
    """
    One-shot CBC decryption.

    Returns:
        Plaintext bytes, or None if the padding is invalid
    """
    out = []
    session = CbcDecryptor(key, iv)
    session.update(data, out.append)
    if not session.finish(out.append):
        return None
    return b"".join(out)
