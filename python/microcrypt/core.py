"""
MicroCrypt Core - Password-based string encryption.

Two wire formats are supported. Both encrypt with AES-256-CBC and are
selected on decode by their textual shape.

v1 (hex):
    "01" || hex(salt(16)) || hex(iv(16)) || hex(ciphertext)
    ciphertext = CBC(UTF-16BE(plaintext) || SHA-256(UTF-16BE(plaintext)))
    key = SHA-256(salt || UTF-16BE(password))

v2 (base64, trailing-'A' trimmed):
    b64(iv(16) || ciphertext)
    ciphertext = CBC(UTF-8(plaintext))
    key = SHA-256^100(UTF-8(password))

Decryption never says *why* it failed beyond "unknown version" versus
"error in decryption"; a wrong password, corruption and tampering all look
the same.

Example:
    >>> from microcrypt import encrypt_string, decrypt_string
    >>> blob = encrypt_string("hunter2", "meet me at noon")
    >>> decrypt_string("hunter2", blob)
    'meet me at noon'
"""

import hmac
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from microcrypt.cbc import IV_SIZE, CbcDecryptor, CbcEncryptor, cbc_encrypt
from microcrypt.encoding import (
    b64decode,
    b64encode,
    hex_decode,
    hex_encode,
    random_bytes as default_random_bytes,
    utf8_decode,
    utf8_encode,
    utf16be_decode,
    utf16be_encode,
)
from microcrypt.errors import (
    ErrorKind,
    FormatError,
    IntegrityError,
    MicroCryptError,
    PaddingError,
)
from microcrypt.kdf import derive_key_v1, derive_key_v2
from microcrypt.sha256 import DIGEST_SIZE, HashState

logger = logging.getLogger(__name__)

SALT_SIZE = 16
V1_VERSION = 0x01
V1_PREFIX = f"{V1_VERSION:02x}"
V1_HEADER_CHARS = 2 + 2 * (SALT_SIZE + IV_SIZE)
DEFAULT_VERSION = 1
VERSIONS = (1, 2)

UNKNOWN_VERSION_MESSAGE = "unknown version"
DECRYPTION_ERROR_MESSAGE = "error in decryption"

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")
_B64_TEXT_RE = re.compile(r"^[A-Za-z0-9+/]*=*$")

RandomSource = Callable[[int], bytes]


@dataclass(frozen=True)
class DecryptResult:
    """Outcome of a decryption: the plaintext, or the kind of failure."""

    ok: bool
    plaintext: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, plaintext: str) -> "DecryptResult":
        return cls(ok=True, plaintext=plaintext)

    @classmethod
    def failure(cls, kind: ErrorKind) -> "DecryptResult":
        return cls(ok=False, error=kind)

    @property
    def message(self) -> str:
        """Plaintext on success, otherwise the generic human-readable error."""
        if self.ok:
            return self.plaintext
        if self.error is ErrorKind.FORMAT:
            return UNKNOWN_VERSION_MESSAGE
        return DECRYPTION_ERROR_MESSAGE


def _take_random(source: RandomSource, n: int) -> bytes:
    data = source(n)
    if len(data) != n:
        raise ValueError(f"Random source returned {len(data)} bytes, expected {n}")
    return bytes(data)


def encrypt_v1(
    password: str,
    plaintext: str,
    random_bytes: RandomSource = default_random_bytes,
) -> str:
    """
    Encrypt a string in the v1 hex format.

    Args:
        password: Password
        plaintext: Message text
        random_bytes: Source of salt and IV bytes

    Returns:
        Lowercase hex text starting with "01"
    """
    salt = _take_random(random_bytes, SALT_SIZE)
    iv = _take_random(random_bytes, IV_SIZE)
    key = derive_key_v1(password, salt)

    result: List[str] = [V1_PREFIX, hex_encode(salt), hex_encode(iv)]

    def writer(block: bytes) -> None:
        result.append(hex_encode(block))

    data = utf16be_encode(plaintext)
    checksum = HashState()
    checksum.append(data)
    checksum.finish()

    cbc = CbcEncryptor(key, iv)
    cbc.update(data, writer)
    cbc.update(checksum.digest(), writer)
    cbc.finish(writer)

    return "".join(result)


def decrypt_v1(password: str, encrypted: str) -> str:
    """
    Decrypt v1 hex text.

    Raises:
        FormatError: Wrong version tag, truncated header or bad hex
        PaddingError: Invalid CBC padding or partial block
        IntegrityError: Embedded checksum mismatch
        EncodingError: Recovered bytes are not valid UTF-16
    """
    if not encrypted.startswith(V1_PREFIX):
        raise FormatError("Unknown version")
    if len(encrypted) < V1_HEADER_CHARS:
        raise FormatError("Truncated v1 header")

    salt = hex_decode(encrypted[2 : 2 + 2 * SALT_SIZE])
    iv = hex_decode(encrypted[2 + 2 * SALT_SIZE : V1_HEADER_CHARS])
    payload = hex_decode(encrypted[V1_HEADER_CHARS:])

    key = derive_key_v1(password, salt)
    decrypted = bytearray()
    cbc = CbcDecryptor(key, iv)
    cbc.update(payload, decrypted.extend)
    if not cbc.finish(decrypted.extend):
        raise PaddingError("Invalid padding")

    hash_start = len(decrypted) - DIGEST_SIZE
    if hash_start < 0:
        raise IntegrityError("Checksum missing")

    checksum = HashState()
    checksum.append_counted(decrypted, hash_start)
    checksum.finish()
    if not hmac.compare_digest(checksum.digest(), bytes(decrypted[hash_start:])):
        raise IntegrityError("Checksum mismatch")

    return utf16be_decode(decrypted[:hash_start])


def encrypt_v2(
    password: str,
    plaintext: str,
    random_bytes: RandomSource = default_random_bytes,
) -> str:
    """
    Encrypt a string in the v2 base64 format.

    Args:
        password: Password
        plaintext: Message text
        random_bytes: Source of IV bytes

    Returns:
        Base64 text of iv || ciphertext
    """
    iv = _take_random(random_bytes, IV_SIZE)
    key = derive_key_v2(password)
    ciphertext = cbc_encrypt(key, iv, utf8_encode(plaintext))
    return b64encode(iv + ciphertext)


def decrypt_v2(password: str, encrypted: str) -> str:
    """
    Decrypt v2 base64 text.

    Raises:
        FormatError: Too short to hold an IV
        PaddingError: Invalid CBC padding, partial block or no ciphertext
        EncodingError: Bad base64 or recovered bytes are not valid UTF-8
    """
    raw = b64decode(encrypted)
    if len(raw) < IV_SIZE:
        raise FormatError("Truncated v2 message")

    iv, payload = raw[:IV_SIZE], raw[IV_SIZE:]
    if not payload:
        raise PaddingError("No ciphertext blocks")

    key = derive_key_v2(password)
    decrypted = bytearray()
    cbc = CbcDecryptor(key, iv)
    cbc.update(payload, decrypted.extend)
    if not cbc.finish(decrypted.extend):
        raise PaddingError("Invalid padding")

    return utf8_decode(decrypted)


def detect_version(encrypted: str) -> int:
    """
    Identify the wire format of an encrypted string.

    Returns:
        1 for "01"-prefixed hex text, 2 for base64 text

    Raises:
        FormatError: If the text matches neither format
    """
    if (
        encrypted.startswith(V1_PREFIX)
        and len(encrypted) % 2 == 0
        and _HEX_RE.match(encrypted)
    ):
        return 1
    if encrypted and _B64_TEXT_RE.match(encrypted):
        return 2
    raise FormatError("Unknown version")


_ENCRYPTORS = {1: encrypt_v1, 2: encrypt_v2}
_DECRYPTORS = {1: decrypt_v1, 2: decrypt_v2}


def encrypt_string(
    password: str,
    plaintext: str,
    version: int = DEFAULT_VERSION,
    random_bytes: RandomSource = default_random_bytes,
) -> str:
    """
    Encrypt a string with a password.

    Args:
        password: Password
        plaintext: Message text
        version: Wire format, 1 (hex) or 2 (base64)
        random_bytes: Source of salt/IV bytes

    Returns:
        Encrypted text

    Raises:
        ValueError: If version is not supported
        EncodingError: If a v2 password or plaintext is not encodable as UTF-8
    """
    try:
        encryptor = _ENCRYPTORS[version]
    except KeyError:
        raise ValueError(f"Unsupported version: {version}") from None
    logger.debug("Encrypting with format v%d", version)
    return encryptor(password, plaintext, random_bytes=random_bytes)


def decrypt_message(password: str, encrypted: str) -> DecryptResult:
    """
    Decrypt text produced by either format.

    Returns:
        DecryptResult carrying the plaintext or the failure kind
    """
    try:
        version = detect_version(encrypted)
        logger.debug("Decrypting format v%d", version)
        plaintext = _DECRYPTORS[version](password, encrypted)
    except MicroCryptError as e:
        logger.debug("Decryption failed: %s", e.kind.value)
        return DecryptResult.failure(e.kind)
    return DecryptResult.success(plaintext)


def decrypt_string(password: str, encrypted: str) -> str:
    """
    Decrypt text, returning the plaintext or a human-readable error.

    The error is "unknown version" when the format is not recognised and
    "error in decryption" for every other failure.
    """
    return decrypt_message(password, encrypted).message


class MicroCrypt:
    """
    Password-bound encryptor for one wire format.

    Example:
        >>> mc = MicroCrypt("my_password", version=2)
        >>> encrypted = mc.encrypt("secret note")
        >>> mc.decrypt(encrypted)
        'secret note'
    """

    def __init__(
        self,
        password: str,
        version: int = DEFAULT_VERSION,
        random_bytes: RandomSource = default_random_bytes,
    ):
        if version not in VERSIONS:
            raise ValueError(f"Unsupported version: {version}")
        self._password = password
        self._version = version
        self._random_bytes = random_bytes

    @property
    def version(self) -> int:
        return self._version

    def encrypt(self, plaintext: str) -> str:
        return encrypt_string(
            self._password, plaintext, self._version, self._random_bytes
        )

    def decrypt(self, encrypted: str) -> Optional[str]:
        """
        Decrypt text in either format.

        Returns:
            Plaintext, or None if decryption fails for any reason
        """
        result = decrypt_message(self._password, encrypted)
        return result.plaintext if result.ok else None
