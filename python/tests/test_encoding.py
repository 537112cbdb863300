"""Tests for MicroCrypt text and binary codecs."""

import base64
import os
import pytest
from microcrypt.encoding import (
    b64decode,
    b64encode,
    hex_decode,
    hex_encode,
    random_bytes,
    utf8_decode,
    utf8_encode,
    utf16be_decode,
    utf16be_encode,
)
from microcrypt.errors import EncodingError, FormatError


class TestBase64:
    """Base64 with trailing-'A' trimming."""

    def test_rfc4648_vectors(self):
        """Vectors without trailing 'A' are standard base64."""
        vectors = {
            b"": "",
            b"f": "Zg==",
            b"fo": "Zm8=",
            b"foo": "Zm9v",
            b"foob": "Zm9vYg==",
            b"fooba": "Zm9vYmE=",
            b"foobar": "Zm9vYmFy",
        }
        for data, encoded in vectors.items():
            assert b64encode(data) == encoded
            assert b64decode(encoded) == data

    def test_long_reference(self):
        """Multi-byte UTF-8 text encodes like standard base64."""
        text = "Polyfon zwitschernd aßen Mäxchens Vögel Rüben, Joghurt und Quark"
        encoded = (
            "UG9seWZvbiB6d2l0c2NoZXJuZCBhw59lbiBNw6R4Y2hlbnMgVsO"
            "2Z2VsIFLDvGJlbiwgSm9naHVydCB1bmQgUXVhcms="
        )
        assert b64encode(text.encode("utf-8")) == encoded
        assert b64decode(encoded).decode("utf-8") == text

    def test_trailing_a_trimmed(self):
        """Up to three trailing 'A's are dropped before the '=' markers."""
        assert b64encode(b"\x00\xff\x80\x0f") == "AP+ADw=="
        assert b64encode(b"\x10") == "E=="
        assert b64encode(b"\x00") == "A=="
        assert b64encode(b"\x00\x00\x00") == "A"
        assert b64encode(bytes(4)) == "AAAAA=="

    def test_trimmed_roundtrip(self):
        """Trimmed output decodes back to the original bytes."""
        for data in (b"\x10", b"\x00", bytes(3), bytes(4), bytes(5), b"ab\x00\x00"):
            assert b64decode(b64encode(data)) == data

    def test_decodes_standard_form(self):
        """Untrimmed standard base64 is still accepted."""
        for _ in range(50):
            data = os.urandom(os.urandom(1)[0] % 40)
            assert b64decode(base64.b64encode(data).decode("ascii")) == data
            assert b64decode(b64encode(data)) == data

    def test_invalid_characters(self):
        """Characters outside the alphabet are rejected."""
        with pytest.raises(EncodingError):
            b64decode("ab$d")
        with pytest.raises(EncodingError):
            b64decode("ab=d")

    def test_excess_padding(self):
        """More '=' markers than decoded bytes is rejected."""
        with pytest.raises(EncodingError):
            b64decode("===")


class TestHex:
    """Lowercase hex codec."""

    def test_encode_lowercase_with_leading_zero(self):
        """Each byte becomes two lowercase digits."""
        assert hex_encode(b"\x00\x0a\xff") == "000aff"

    def test_decode_either_case(self):
        """Upper- and lower-case digits are accepted."""
        assert hex_decode("00AaFf") == b"\x00\xaa\xff"

    def test_malformed(self):
        """Odd length and non-hex characters are rejected."""
        with pytest.raises(FormatError):
            hex_decode("abc")
        with pytest.raises(FormatError):
            hex_decode("zz")
        with pytest.raises(FormatError):
            hex_decode("ab cd")


class TestText:
    """UTF-8 and UTF-16BE transcoding."""

    def test_utf8_vectors(self):
        """Multi-byte sequences of each length."""
        vectors = {
            "": b"",
            "abc": b"abc",
            "ä": b"\xc3\xa4",
            "€": b"\xe2\x82\xac",
            "\U0001D11E": b"\xf0\x9d\x84\x9e",
            "\U0001F600": b"\xf0\x9f\x98\x80",
        }
        for text, data in vectors.items():
            assert utf8_encode(text) == data
            assert utf8_decode(data) == text

    def test_utf8_invalid(self):
        """Bad continuation bytes and lone surrogates fail."""
        with pytest.raises(EncodingError):
            utf8_decode(b"\xc3\x28")
        with pytest.raises(EncodingError):
            utf8_encode("\udc00")

    def test_utf16be(self):
        """Two bytes per code unit; astral characters become pairs."""
        assert utf16be_encode("Aä") == b"\x00A\x00\xe4"
        assert utf16be_encode("\U0001F600") == b"\xd8\x3d\xde\x00"
        assert utf16be_decode(b"\xd8\x3d\xde\x00") == "\U0001F600"

    def test_utf16be_lone_surrogate_roundtrip(self):
        """Lone surrogates survive a round trip."""
        assert utf16be_decode(utf16be_encode("x\ud800y")) == "x\ud800y"

    def test_utf16be_odd_length(self):
        """Odd byte counts are rejected."""
        with pytest.raises(EncodingError):
            utf16be_decode(b"\x00A\x00")


def test_random_bytes_length():
    """Random bytes have the exact requested length."""
    assert len(random_bytes(16)) == 16
    assert random_bytes(0) == b""
    assert random_bytes(32) != random_bytes(32)
