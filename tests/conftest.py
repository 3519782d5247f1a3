"""
Test Configuration
==================

Pytest fixtures and test configuration for IntercomNotify.
"""

import pytest

from intercom_notify.models.frame import RawFrame
from intercom_notify.pipeline import build_frame, encrypt_body, pack_event


TEST_KEY = bytes(range(32))
OTHER_KEY = bytes(range(1, 33))
TEST_NONCE = bytes(range(8))
TEST_IDENTITY = "ABCDEF"


def make_frame_bytes(
    intercom_id: str = TEST_IDENTITY,
    event_code: str = "doorbell",
    timestamp: int = 1707321234,
    key: bytes = TEST_KEY,
    nonce: bytes = TEST_NONCE,
) -> bytes:
    """Encrypted wire frame for the given plaintext fields."""
    body = encrypt_body(pack_event(intercom_id, event_code, timestamp), nonce, key)
    return build_frame(body[:8], body[8:])


def make_raw(payload: bytes, received_at: float = 1000.0, port: int = 6524) -> RawFrame:
    return RawFrame(
        payload=payload,
        source_address=("192.168.1.20", port),
        received_at=received_at,
    )


@pytest.fixture
def session_key():
    """Fixed 32-byte session key."""
    return TEST_KEY


@pytest.fixture
def motion_frame():
    """Frame carrying the reference motion event (timestamp 1)."""
    plaintext = b"ABCDEF" + b"MOTION  " + b"\x00\x00\x00\x01"
    body = encrypt_body(plaintext, bytes.fromhex("0001020304050607"), TEST_KEY)
    return make_raw(bytes.fromhex("deadbe02") + body)


@pytest.fixture
def doorbell_frame():
    """Frame carrying a doorbell event."""
    return make_raw(make_frame_bytes(event_code="doorbell"))


@pytest.fixture
def captured_events():
    """List collecting events passed to on_event."""
    return []
