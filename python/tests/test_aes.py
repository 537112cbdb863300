"""Tests for MicroCrypt AES-256 block cipher."""

import os
import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from microcrypt.aes import (
    AES256,
    INV_SBOX,
    SBOX,
    decrypt_block,
    encrypt_block,
    expand_key,
    gf_mul,
)

FIPS_KEY = bytes(range(32))
FIPS_PLAIN = bytes.fromhex("00112233445566778899aabbccddeeff")
FIPS_CIPHER = bytes.fromhex("8ea2b7ca516745bfeafc49904b496089")

SP800_KEY = bytes.fromhex(
    "603deb1015ca71be2b73aef0857d77811f352c073b6108d72d9810a30914dff4"
)


class TestTables:
    """Test S-box and field arithmetic."""

    def test_sbox_is_permutation(self):
        """S-box maps 256 bytes onto 256 distinct bytes."""
        assert sorted(SBOX) == list(range(256))

    def test_inverse_sbox(self):
        """Inverse S-box undoes the S-box."""
        for i in range(256):
            assert INV_SBOX[SBOX[i]] == i

    def test_sbox_known_entries(self):
        """Spot-check published S-box entries."""
        assert SBOX[0x00] == 0x63
        assert SBOX[0x53] == 0xED
        assert SBOX[0xFF] == 0x16

    def test_gf_mul(self):
        """GF(2^8) products from FIPS-197 section 4.2."""
        assert gf_mul(0x57, 0x83) == 0xC1
        assert gf_mul(0x57, 0x13) == 0xFE
        assert gf_mul(0x02, 0x80) == 0x1B
        assert gf_mul(0x01, 0xAB) == 0xAB
        assert gf_mul(0x00, 0xAB) == 0x00


class TestKeyExpansion:
    """Test the AES-256 key schedule."""

    def test_length(self):
        """Expanded key is 240 bytes and starts with the key."""
        expanded = expand_key(SP800_KEY)
        assert len(expanded) == 240
        assert expanded[:32] == SP800_KEY

    def test_fips197_words(self):
        """Schedule words from FIPS-197 appendix A.3."""
        expanded = expand_key(SP800_KEY)
        assert expanded[32:48].hex() == "9ba354118e6925afa51a8b5f2067fcde"
        assert expanded[224:240].hex() == "fe4890d1e6188d0b046df344706c631e"

    def test_invalid_key_length(self):
        """Keys other than 32 bytes are rejected."""
        with pytest.raises(ValueError):
            expand_key(b"short")
        with pytest.raises(ValueError):
            expand_key(bytes(16))


class TestBlockCipher:
    """Test single-block encryption and decryption."""

    def test_fips197_vector(self):
        """FIPS-197 appendix C.3 AES-256 example."""
        expanded = expand_key(FIPS_KEY)
        assert encrypt_block(expanded, FIPS_PLAIN) == FIPS_CIPHER
        assert decrypt_block(expanded, FIPS_CIPHER) == FIPS_PLAIN

    def test_sp800_38a_ecb_vectors(self):
        """SP 800-38A F.1.5 ECB-AES256 blocks."""
        codebook = AES256(SP800_KEY)
        vectors = [
            ("6bc1bee22e409f96e93d7e117393172a", "f3eed1bdb5d2a03c064b5a7e3db181f8"),
            ("ae2d8a571e03ac9c9eb76fac45af8e51", "591ccb10d410ed26dc5ba74a31362870"),
            ("30c81c46a35ce411e5fbc1191a0a52ef", "b6ed21b99ca6f4f9f153e7b1beafed1d"),
            ("f69f2445df4f9b17ad2b417be66c3710", "23304b7a39f9f3ff067d8d8f9e24ecc7"),
        ]
        for plain, cipher in vectors:
            assert codebook.encrypt(bytes.fromhex(plain)).hex() == cipher
            assert codebook.decrypt(bytes.fromhex(cipher)).hex() == plain

    def test_matches_cryptography(self):
        """Random keys and blocks agree with the cryptography package."""
        for _ in range(10):
            key = os.urandom(32)
            block = os.urandom(16)
            reference = Cipher(algorithms.AES(key), modes.ECB()).encryptor()
            expected = reference.update(block) + reference.finalize()
            assert AES256(key).encrypt(block) == expected

    def test_roundtrip(self):
        """decrypt(encrypt(B)) == B."""
        for _ in range(20):
            codebook = AES256(os.urandom(32))
            block = os.urandom(16)
            assert codebook.decrypt(codebook.encrypt(block)) == block

    def test_input_not_modified(self):
        """Input buffers are left untouched."""
        expanded = expand_key(FIPS_KEY)
        block = bytearray(FIPS_PLAIN)
        encrypt_block(expanded, block)
        assert bytes(block) == FIPS_PLAIN

    def test_invalid_block_length(self):
        """Blocks other than 16 bytes are rejected."""
        expanded = expand_key(FIPS_KEY)
        with pytest.raises(ValueError):
            encrypt_block(expanded, bytes(15))
        with pytest.raises(ValueError):
            decrypt_block(expanded, bytes(17))
