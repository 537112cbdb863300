"""
MicroCrypt Encoding - Text and binary codecs used by the message formats.

UTF-8 and UTF-16BE transcoding, lowercase hex, and a base64 variant whose
encoder drops up to three trailing 'A' characters before the '=' markers.
The decoder restores them, so it accepts both trimmed and standard input.
"""

import base64
import binascii
import re
import secrets

from microcrypt.errors import EncodingError, FormatError

_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{2})*$")
_B64_RE = re.compile(r"^[A-Za-z0-9+/]*$")


def random_bytes(n: int) -> bytes:
    """Return n cryptographically secure random bytes."""
    return secrets.token_bytes(n)


def utf8_encode(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Cannot encode text as UTF-8: {e.reason}") from e


def utf8_decode(data: bytes) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Invalid UTF-8 at byte {e.start}") from e


def utf16be_encode(text: str) -> bytes:
    """Two big-endian bytes per UTF-16 code unit; lone surrogates pass through."""
    return text.encode("utf-16-be", "surrogatepass")


def utf16be_decode(data: bytes) -> str:
    if len(data) % 2:
        raise EncodingError(f"UTF-16 data has odd length {len(data)}")
    return bytes(data).decode("utf-16-be", "surrogatepass")


def hex_encode(data: bytes) -> str:
    return bytes(data).hex()


def hex_decode(text: str) -> bytes:
    """
    Parse hex digits (either case) into bytes.

    Raises:
        FormatError: On odd length or non-hex characters
    """
    if not _HEX_RE.match(text):
        raise FormatError("Malformed hex encoding")
    return bytes.fromhex(text)


def b64encode(data: bytes) -> str:
    """
    Base64-encode data, trimming up to three trailing 'A' characters.

    The trim is applied to the encoding with its padding positions still
    filled with 'A' (zero bits), then one '=' per padded position is
    appended.
    """
    standard = base64.b64encode(bytes(data)).decode("ascii")
    body = standard.rstrip("=")
    suffix = "=" * (len(standard) - len(body))
    body += "A" * len(suffix)

    for _ in range(3):
        if not body.endswith("A"):
            break
        body = body[:-1]
    return body + suffix


def b64decode(text: str) -> bytes:
    """
    Decode output of b64encode() or standard padded base64.

    Raises:
        EncodingError: On characters outside the base64 alphabet
    """
    body = text.rstrip("=")
    surplus = len(text) - len(body)
    if not _B64_RE.match(body):
        raise EncodingError("Invalid base64 character")

    body += "A" * (-len(body) % 4)
    try:
        decoded = base64.b64decode(body, validate=True)
    except binascii.Error as e:
        raise EncodingError(f"Invalid base64: {e}") from e

    if surplus > len(decoded):
        raise EncodingError("Base64 padding exceeds data length")
    return decoded[: len(decoded) - surplus]
