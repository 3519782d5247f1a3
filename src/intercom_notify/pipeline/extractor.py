"""
Event Extractor
===============

Parses the fixed 18-byte plaintext and checks it is addressed to us.

The identity check sits on top of cryptographic authentication: the
session key may be shared across receivers, so the identity field
decides which logical receiver an event belongs to. The expected
identity is the first 6 characters of the configured username.

Timestamps are not range checked. Any u32 is accepted.
"""

import logging
import struct

from intercom_notify.errors import ParseFailure
from intercom_notify.models.event import DecryptedEvent
from intercom_notify.models.reason_codes import DropReason


logger = logging.getLogger(__name__)


PLAINTEXT_SIZE = 18
IDENTITY_SIZE = 6
EVENT_CODE_SIZE = 8

_PLAINTEXT = struct.Struct(">6s8sI")

# Padding seen in identity/event fields
_PAD = b" \t\r\n\x00"


def _text(field: bytes) -> str:
    return field.rstrip(_PAD).decode("ascii", errors="replace")


def expected_prefix_for(identity: str) -> str:
    """Identity prefix carried in plaintexts addressed to `identity`."""
    return identity[:IDENTITY_SIZE].rstrip()


def extract_event(plaintext: bytes, expected_prefix: str) -> DecryptedEvent:
    """
    Parse a decrypted plaintext.

    Args:
        plaintext: Output of AeadDecryptor.decrypt
        expected_prefix: First 6 characters of the receiver identity

    Returns:
        DecryptedEvent

    Raises:
        ParseFailure: BAD_LENGTH or IDENTITY_MISMATCH
    """
    if len(plaintext) != PLAINTEXT_SIZE:
        raise ParseFailure(
            DropReason.BAD_LENGTH,
            f"plaintext is {len(plaintext)} bytes, expected {PLAINTEXT_SIZE}",
        )

    raw_id, raw_code, timestamp = _PLAINTEXT.unpack(plaintext)
    intercom_id = _text(raw_id)

    if intercom_id != expected_prefix_for(expected_prefix):
        raise ParseFailure(
            DropReason.IDENTITY_MISMATCH,
            f"event addressed to {intercom_id!r}",
        )

    return DecryptedEvent(
        intercom_id=intercom_id,
        event_code=_text(raw_code),
        timestamp=timestamp,
    )


def pack_event(intercom_id: str, event_code: str, timestamp: int) -> bytes:
    """Build an 18-byte plaintext (space padded). Inverse of extract_event."""
    return _PLAINTEXT.pack(
        intercom_id.encode("ascii")[:IDENTITY_SIZE].ljust(IDENTITY_SIZE),
        event_code.encode("ascii")[:EVENT_CODE_SIZE].ljust(EVENT_CODE_SIZE),
        timestamp,
    )
