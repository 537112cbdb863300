"""
MicroCrypt SHA-256 - Streaming SHA-256 hash in pure Python.

Bytes are assembled into big-endian 32-bit words; every 16 words the
compression function runs over the 64-word message schedule. finish()
appends the Merkle-Damgard padding, after which words() holds the digest.

Example:
    >>> from microcrypt.sha256 import HashState
    >>> h = HashState()
    >>> h.append(b"abc")
    >>> h.finish()
    >>> h.hexdigest()
    'ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad'
"""

import struct
from typing import List, Optional, Tuple

DIGEST_SIZE = 32
BLOCK_SIZE = 64

_MASK = 0xFFFFFFFF

_H0 = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)

_K = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def _compress(hash_words: List[int], w: List[int]) -> None:
    """Run one compression round over a 16-word block, updating hash_words in place."""
    for i in range(16, 64):
        v = w[i - 2]
        s1 = _rotr(v, 17) ^ _rotr(v, 19) ^ (v >> 10)
        v = w[i - 15]
        s0 = _rotr(v, 7) ^ _rotr(v, 18) ^ (v >> 3)
        w[i] = (s1 + w[i - 7] + s0 + w[i - 16]) & _MASK

    a, b, c, d, e, f, g, h = hash_words
    for i in range(64):
        sum1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
        ch = (e & f) ^ (~e & g)
        t1 = (h + sum1 + ch + _K[i] + w[i]) & _MASK
        sum0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
        maj = (a & b) ^ (a & c) ^ (b & c)
        t2 = (sum0 + maj) & _MASK
        h, g, f, e, d, c, b, a = g, f, e, (d + t1) & _MASK, c, b, a, (t1 + t2) & _MASK

    for i, v in enumerate((a, b, c, d, e, f, g, h)):
        hash_words[i] = (hash_words[i] + v) & _MASK


class HashState:
    """
    Running SHA-256 state.

    Holds the eight chaining words, a 4-byte word-assembly buffer, the
    total bit count and the 64-word message schedule. A state must not
    be appended to after finish().
    """

    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: Optional[bytes] = None):
        self._hash = list(_H0)
        self._buffer = bytearray(4)
        self._buffer_used = 0
        self._count = 0
        self._work = [0] * 64
        self._work_used = 0
        self._finished = False
        if data is not None:
            self.append(data)

    @property
    def bit_count(self) -> int:
        """Number of message bits absorbed so far."""
        return self._count

    @property
    def finished(self) -> bool:
        return self._finished

    def append(self, data: bytes) -> None:
        """Absorb all of data."""
        self.append_counted(data, len(data))

    def append_counted(self, data: bytes, count: int) -> None:
        """
        Absorb only the first count bytes of data.

        Args:
            data: Byte sequence
            count: Number of leading bytes to consume

        Raises:
            RuntimeError: If the hash has already been finished
            ValueError: If count is negative or exceeds len(data)
        """
        if self._finished:
            raise RuntimeError("Hash already finished - create a new HashState")
        if count < 0 or count > len(data):
            raise ValueError(f"Count {count} out of range for {len(data)} bytes")
        self._absorb(memoryview(bytes(data[:count])))

    def _absorb(self, data: memoryview) -> None:
        pos, end = 0, len(data)
        self._count += 8 * end

        while pos < end:
            if self._buffer_used == 0 and end - pos >= 4:
                # Whole words straight into the schedule.
                take = min((end - pos) // 4, 16 - self._work_used)
                words = struct.unpack_from(f">{take}I", data, pos)
                self._work[self._work_used : self._work_used + take] = words
                self._work_used += take
                pos += 4 * take
            else:
                self._buffer[self._buffer_used] = data[pos]
                self._buffer_used += 1
                pos += 1
                if self._buffer_used < 4:
                    continue
                self._work[self._work_used] = struct.unpack(">I", self._buffer)[0]
                self._work_used += 1
                self._buffer_used = 0

            if self._work_used == 16:
                _compress(self._hash, self._work)
                self._work_used = 0

    def finish(self) -> None:
        """Append Merkle-Damgard padding; the state then holds the final digest."""
        if self._finished:
            raise RuntimeError("Hash already finished")
        total = self._count
        self._absorb(memoryview(b"\x80"))
        zeros = ((448 - self._count) % 512) // 8
        self._absorb(memoryview(bytes(zeros)))
        self._absorb(memoryview(struct.pack(">Q", total & 0xFFFFFFFFFFFFFFFF)))
        self._finished = True

    def words(self) -> Tuple[int, ...]:
        """The eight 32-bit digest words (only meaningful after finish())."""
        if not self._finished:
            raise RuntimeError("Hash not finished yet")
        return tuple(self._hash)

    def digest(self) -> bytes:
        return struct.pack(">8I", *self.words())

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> "HashState":
        other = HashState.__new__(HashState)
        other._hash = list(self._hash)
        other._buffer = bytearray(self._buffer)
        other._buffer_used = self._buffer_used
        other._count = self._count
        other._work = list(self._work)
        other._work_used = self._work_used
        other._finished = self._finished
        return other


def sha256(data: bytes) -> bytes:
    """One-shot SHA-256 digest of data."""
    state = HashState(data)
    state.finish()
    return state.digest()
