"""Tests for MicroCrypt key derivation."""

import hashlib
import os
import pytest
from microcrypt.errors import EncodingError
from microcrypt.kdf import V2_ITERATIONS, derive_key_v1, derive_key_v2, digest_to_bytes


class TestDeriveKeyV1:
    """Salted single-pass derivation."""

    def test_matches_hashlib(self):
        """Key is SHA-256(salt || UTF-16BE(password))."""
        salt = os.urandom(16)
        expected = hashlib.sha256(salt + "pässwörd".encode("utf-16-be")).digest()
        assert derive_key_v1("pässwörd", salt) == expected

    def test_astral_characters_use_surrogates(self):
        """Characters outside the BMP contribute a surrogate pair."""
        salt = bytes(16)
        expected = hashlib.sha256(salt + bytes.fromhex("d83dde00")).digest()
        assert derive_key_v1("\U0001F600", salt) == expected

    def test_salt_changes_key(self):
        """Different salts give different keys."""
        assert derive_key_v1("pw", bytes(16)) != derive_key_v1("pw", b"\x01" * 16)

    def test_key_length(self):
        """Keys are 32 bytes, also for an empty password."""
        assert len(derive_key_v1("", bytes(16))) == 32


class TestDeriveKeyV2:
    """Unsalted iterated derivation."""

    def test_matches_hashlib(self):
        """Key is SHA-256 applied 100 times to UTF-8(password)."""
        expected = "correct horse".encode("utf-8")
        for _ in range(100):
            expected = hashlib.sha256(expected).digest()
        assert V2_ITERATIONS == 100
        assert derive_key_v2("correct horse") == expected

    def test_single_iteration(self):
        """One iteration is a plain SHA-256."""
        assert derive_key_v2("abc", iterations=1) == hashlib.sha256(b"abc").digest()

    def test_deterministic(self):
        """Same password gives the same key."""
        assert derive_key_v2("password") == derive_key_v2("password")

    def test_invalid_iterations(self):
        """Zero iterations are rejected."""
        with pytest.raises(ValueError):
            derive_key_v2("pw", iterations=0)

    def test_unencodable_password(self):
        """Lone surrogates cannot be UTF-8 encoded."""
        with pytest.raises(EncodingError):
            derive_key_v2("\ud800")


def test_digest_to_bytes():
    """Words are laid out big-endian."""
    assert digest_to_bytes([0x01020304] + [0] * 7)[:4] == b"\x01\x02\x03\x04"
