"""
AEAD Decryptor
==============

Authenticates and decrypts the notification body with the device session key.

Cipher:
    ChaCha20-Poly1305 in its original construction (64-bit nonce), as
    exposed by libsodium's crypto_aead_chacha20poly1305_*. No associated
    data is used.

Body Layout:
    bytes 0..7    nonce
    bytes 8..     ciphertext followed by the 16-byte tag

Failure Policy:
    Broadcast media deliver every device's notifications to every listener,
    so a tag that does not verify is the expected outcome for traffic meant
    for someone else. It is reported as AUTHENTICATION_FAILED and the frame
    is dropped; it is never escalated.
"""

import logging

from nacl.bindings import (
    crypto_aead_chacha20poly1305_decrypt,
    crypto_aead_chacha20poly1305_encrypt,
)
from nacl.exceptions import CryptoError

from intercom_notify.errors import DecryptFailure
from intercom_notify.models.frame import NONCE_SIZE, CipherSection
from intercom_notify.models.reason_codes import DropReason


logger = logging.getLogger(__name__)


KEY_SIZE = 32
MIN_CIPHERTEXT_SIZE = 32


class AeadDecryptor:
    """
    Decryptor bound to one 32-byte session key.

    Example:
        decryptor = AeadDecryptor(key)
        plaintext = decryptor.decrypt(frame.body)
    """

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            raise ValueError(f"session key must be {KEY_SIZE} bytes, got {len(key)}")
        self._key = bytes(key)

    def decrypt(self, body: bytes) -> bytes:
        """
        Decrypt a frame body.

        Args:
            body: Frame bytes from offset 4 onward

        Returns:
            Plaintext exactly as reported by the cipher.

        Raises:
            DecryptFailure: INVALID_NONCE_LENGTH, CIPHERTEXT_TOO_SHORT
                or AUTHENTICATION_FAILED
        """
        section = CipherSection.from_body(bytes(body))

        if len(section.nonce) != NONCE_SIZE:
            raise DecryptFailure(
                DropReason.INVALID_NONCE_LENGTH,
                f"nonce is {len(section.nonce)} bytes, expected {NONCE_SIZE}",
            )

        if len(section.ciphertext_with_tag) < MIN_CIPHERTEXT_SIZE:
            raise DecryptFailure(
                DropReason.CIPHERTEXT_TOO_SHORT,
                f"ciphertext is {len(section.ciphertext_with_tag)} bytes, "
                f"minimum {MIN_CIPHERTEXT_SIZE}",
            )

        try:
            return crypto_aead_chacha20poly1305_decrypt(
                section.ciphertext_with_tag,
                None,
                section.nonce,
                self._key,
            )
        except CryptoError:
            raise DecryptFailure(
                DropReason.AUTHENTICATION_FAILED,
                "authentication tag did not verify",
            ) from None


def encrypt_body(plaintext: bytes, nonce: bytes, key: bytes) -> bytes:
    """
    Produce a frame body (nonce + ciphertext + tag) for plaintext.

    Inverse of AeadDecryptor.decrypt; used by tests and the test sender.
    """
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"nonce must be {NONCE_SIZE} bytes")
    ciphertext = crypto_aead_chacha20poly1305_encrypt(plaintext, None, nonce, key)
    return nonce + ciphertext
