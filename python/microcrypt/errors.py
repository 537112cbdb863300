"""
MicroCrypt Errors - Failure taxonomy for message decryption.

Every failure carries an ErrorKind so callers can branch on the kind
without parsing messages. Top-level string entry points collapse all of
them into two fixed messages.
"""

from enum import Enum


class ErrorKind(Enum):
    """Why a message could not be processed."""

    FORMAT = "format"
    PADDING = "padding"
    INTEGRITY = "integrity"
    ENCODING = "encoding"


class MicroCryptError(Exception):
    """Base class for all MicroCrypt failures."""

    kind: ErrorKind = ErrorKind.FORMAT


class FormatError(MicroCryptError):
    """Unknown version tag or malformed textual encoding."""

    kind = ErrorKind.FORMAT


class PaddingError(MicroCryptError):
    """Pad byte outside [1, 16] or a partial trailing block."""

    kind = ErrorKind.PADDING


class IntegrityError(MicroCryptError):
    """Embedded v1 digest does not match the recovered plaintext."""

    kind = ErrorKind.INTEGRITY


class EncodingError(MicroCryptError):
    """Text or binary codec failure (bad UTF-8, UTF-16 or base64)."""

    kind = ErrorKind.ENCODING
