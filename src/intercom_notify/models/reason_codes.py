"""
Reason Codes
============

Fixed set of machine-readable reasons for dropping a frame.

Every frame that does not produce an event is dropped with exactly ONE
reason code. None of them are fatal to the listener.

Rules:
    - One clear cause per code
    - AUTHENTICATION_FAILED is the normal outcome for broadcast traffic
      addressed to other receivers
"""

from enum import Enum


class DropReason(str, Enum):
    """
    Why a frame was dropped.

    Attributes:
        TOO_SHORT: Datagram shorter than the 4-byte header
        UNRECOGNIZED: Header identifier or version mismatch
        DUPLICATE: Byte-identical copy inside the suppression window
        INVALID_NONCE_LENGTH: Body too short to hold the 8-byte nonce
        CIPHERTEXT_TOO_SHORT: Ciphertext + tag below the 32-byte floor
        AUTHENTICATION_FAILED: Poly1305 tag did not verify under our key
        BAD_LENGTH: Plaintext is not exactly 18 bytes
        IDENTITY_MISMATCH: Plaintext addressed to a different receiver
    """

    # Framing
    TOO_SHORT = "TOO_SHORT"
    UNRECOGNIZED = "UNRECOGNIZED"

    # Filtering
    DUPLICATE = "DUPLICATE"

    # Decryption
    INVALID_NONCE_LENGTH = "INVALID_NONCE_LENGTH"
    CIPHERTEXT_TOO_SHORT = "CIPHERTEXT_TOO_SHORT"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"

    # Parsing
    BAD_LENGTH = "BAD_LENGTH"
    IDENTITY_MISMATCH = "IDENTITY_MISMATCH"
