"""
Frame Data Models
=================

Immutable views over a received notification datagram.

Wire Layout (network byte order):
    offset 0   3 bytes   identifier      (DE AD BE)
    offset 3   1 byte    version         (0x02)
    offset 4   8 bytes   nonce
    offset 12  variable  ciphertext + 16-byte Poly1305 tag

Design Rules:
    - Frames are created once per datagram and never modified
    - Slicing helpers do NOT validate; validation lives in the pipeline
"""

from dataclasses import dataclass
from typing import Any, Tuple


HEADER_SIZE = 4
NONCE_SIZE = 8
TAG_SIZE = 16


@dataclass(frozen=True, slots=True)
class RawFrame:
    """
    One datagram as received from the network.

    Attributes:
        payload: Raw datagram bytes
        source_address: (host, port) of the sender
        received_at: Monotonic receipt time (seconds), used for duplicate windows
    """

    payload: bytes
    source_address: Tuple[str, int]
    received_at: float

    @property
    def body(self) -> bytes:
        """Bytes following the 4-byte header."""
        return self.payload[HEADER_SIZE:]

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the payload."""
        return (
            f"RawFrame(len={len(self.payload)}, "
            f"source={self.source_address}, "
            f"received_at={self.received_at:.3f})"
        )


@dataclass(frozen=True, slots=True)
class FrameHeader:
    """Parsed 4-byte frame header."""

    identifier: bytes
    version: int


@dataclass(frozen=True, slots=True)
class CipherSection:
    """
    Nonce and authenticated ciphertext carried in the frame body.

    Attributes:
        nonce: 8-byte AEAD nonce
        ciphertext_with_tag: Ciphertext followed by the 16-byte tag
    """

    nonce: bytes
    ciphertext_with_tag: bytes

    @classmethod
    def from_body(cls, body: bytes) -> "CipherSection":
        return cls(nonce=body[:NONCE_SIZE], ciphertext_with_tag=body[NONCE_SIZE:])


def format_address(address: Any) -> str:
    """Render a socket address for logs."""
    if isinstance(address, tuple) and len(address) >= 2:
        return f"{address[0]}:{address[1]}"
    return str(address)
