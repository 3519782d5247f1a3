"""
AEAD Decryptor Tests
====================
"""

import pytest

from intercom_notify.errors import DecryptFailure
from intercom_notify.models.reason_codes import DropReason
from intercom_notify.pipeline.crypto import AeadDecryptor, encrypt_body
from intercom_notify.pipeline.extractor import pack_event

from conftest import OTHER_KEY, TEST_KEY, TEST_NONCE


PLAINTEXT = pack_event("ABCDEF", "motion", 1)


class TestAeadDecryptor:
    """Tests for authenticated decryption."""

    def test_decrypts_own_frames(self):
        body = encrypt_body(PLAINTEXT, TEST_NONCE, TEST_KEY)
        assert AeadDecryptor(TEST_KEY).decrypt(body) == PLAINTEXT

    def test_body_layout(self):
        """Nonce, then ciphertext of equal length, then 16-byte tag."""
        body = encrypt_body(PLAINTEXT, TEST_NONCE, TEST_KEY)
        assert body[:8] == TEST_NONCE
        assert len(body) == 8 + len(PLAINTEXT) + 16

    def test_other_key_fails_authentication(self):
        """Frames for other receivers are an ordinary authentication failure."""
        body = encrypt_body(PLAINTEXT, TEST_NONCE, OTHER_KEY)
        with pytest.raises(DecryptFailure) as exc_info:
            AeadDecryptor(TEST_KEY).decrypt(body)
        assert exc_info.value.reason == DropReason.AUTHENTICATION_FAILED

    @pytest.mark.parametrize("index", [0, 7, 8, 20, 25, 33, 41])
    def test_tampered_byte_fails_authentication(self, index):
        """Flipping any nonce, ciphertext or tag byte never yields plaintext."""
        body = bytearray(encrypt_body(PLAINTEXT, TEST_NONCE, TEST_KEY))
        body[index] ^= 0x01
        with pytest.raises(DecryptFailure) as exc_info:
            AeadDecryptor(TEST_KEY).decrypt(bytes(body))
        assert exc_info.value.reason == DropReason.AUTHENTICATION_FAILED

    @pytest.mark.parametrize("body", [b"", b"\x00" * 7])
    def test_short_nonce(self, body):
        with pytest.raises(DecryptFailure) as exc_info:
            AeadDecryptor(TEST_KEY).decrypt(body)
        assert exc_info.value.reason == DropReason.INVALID_NONCE_LENGTH

    @pytest.mark.parametrize("size", [0, 16, 31])
    def test_short_ciphertext(self, size):
        with pytest.raises(DecryptFailure) as exc_info:
            AeadDecryptor(TEST_KEY).decrypt(TEST_NONCE + bytes(size))
        assert exc_info.value.reason == DropReason.CIPHERTEXT_TOO_SHORT

    def test_minimum_ciphertext_reaches_cipher(self):
        """32 bytes passes the floor and fails on the tag instead."""
        with pytest.raises(DecryptFailure) as exc_info:
            AeadDecryptor(TEST_KEY).decrypt(TEST_NONCE + bytes(32))
        assert exc_info.value.reason == DropReason.AUTHENTICATION_FAILED

    def test_plaintext_length_not_enforced(self):
        """Any plaintext the cipher reports is returned as is."""
        body = encrypt_body(b"z" * 20, TEST_NONCE, TEST_KEY)
        assert AeadDecryptor(TEST_KEY).decrypt(body) == b"z" * 20

    def test_key_length_checked(self):
        with pytest.raises(ValueError):
            AeadDecryptor(b"short")

    def test_bytearray_body(self):
        body = bytearray(encrypt_body(PLAINTEXT, TEST_NONCE, TEST_KEY))
        assert AeadDecryptor(TEST_KEY).decrypt(body) == PLAINTEXT
