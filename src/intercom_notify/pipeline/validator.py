"""
Frame Validator
===============

Checks the fixed 4-byte header of a raw datagram before any other stage runs.

Accepted header:
    identifier = DE AD BE
    version    = 0x02

Anything else is rejected. Validation is a pure function over the bytes.
"""

from intercom_notify.errors import FrameRejected
from intercom_notify.models.frame import HEADER_SIZE, FrameHeader, RawFrame
from intercom_notify.models.reason_codes import DropReason


FRAME_IDENTIFIER = b"\xde\xad\xbe"
FRAME_VERSION = 0x02


def validate_frame(raw: RawFrame) -> FrameHeader:
    """
    Parse and verify the frame header.

    Args:
        raw: Datagram as received

    Returns:
        FrameHeader of an accepted frame. The body (offset 4 onward)
        is available via raw.body.

    Raises:
        FrameRejected: TOO_SHORT or UNRECOGNIZED
    """
    payload = raw.payload
    if len(payload) < HEADER_SIZE:
        raise FrameRejected(
            DropReason.TOO_SHORT,
            f"datagram is {len(payload)} bytes, header needs {HEADER_SIZE}",
        )

    header = FrameHeader(identifier=bytes(payload[:3]), version=payload[3])
    if header.identifier != FRAME_IDENTIFIER or header.version != FRAME_VERSION:
        raise FrameRejected(
            DropReason.UNRECOGNIZED,
            f"unrecognized header {header.identifier.hex()}/{header.version:#04x}",
        )

    return header


def build_frame(nonce: bytes, ciphertext_with_tag: bytes) -> bytes:
    """Assemble a wire frame from its cipher section."""
    return FRAME_IDENTIFIER + bytes([FRAME_VERSION]) + nonce + ciphertext_with_tag
