"""
Frame Validator Tests
=====================
"""

import pytest

from intercom_notify.errors import FrameRejected
from intercom_notify.models.reason_codes import DropReason
from intercom_notify.pipeline.validator import build_frame, validate_frame

from conftest import make_raw


class TestValidateFrame:
    """Tests for header validation."""

    @pytest.mark.parametrize("payload", [b"", b"\xde", b"\xde\xad", b"\xde\xad\xbe"])
    def test_too_short(self, payload):
        """Anything under 4 bytes is TOO_SHORT."""
        with pytest.raises(FrameRejected) as exc_info:
            validate_frame(make_raw(payload))
        assert exc_info.value.reason == DropReason.TOO_SHORT

    @pytest.mark.parametrize("header", [
        b"\xde\xad\xbf\x02",
        b"\x00\xad\xbe\x02",
        b"\xde\xad\xbe\x01",
        b"\xde\xad\xbe\x03",
    ])
    def test_unrecognized_header(self, header):
        """Wrong identifier or version is UNRECOGNIZED."""
        with pytest.raises(FrameRejected) as exc_info:
            validate_frame(make_raw(header + bytes(44)))
        assert exc_info.value.reason == DropReason.UNRECOGNIZED

    def test_header_only_is_accepted(self):
        """Header check does not look at the body."""
        header = validate_frame(make_raw(b"\xde\xad\xbe\x02"))
        assert header.identifier == b"\xde\xad\xbe"
        assert header.version == 2

    def test_body_follows_header(self):
        """The body starts right after the header."""
        frame = make_raw(build_frame(bytes(8), b"x" * 34))
        validate_frame(frame)
        assert frame.body == bytes(8) + b"x" * 34
