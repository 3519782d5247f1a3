"""
Pipeline Errors
===============

Exceptions raised by individual pipeline stages.

These never escape NotificationProcessor.process_frame: the processor
converts them into a FrameOutcome carrying the DropReason.
KeyProvisioningError is the only error that is fatal to the service.
"""

from intercom_notify.models.reason_codes import DropReason


class PipelineError(Exception):
    """Base class for per-frame failures."""

    def __init__(self, reason: DropReason, message: str = "") -> None:
        super().__init__(message or reason.value)
        self.reason = reason


class FrameRejected(PipelineError):
    """Malformed or unrecognized frame header."""


class DecryptFailure(PipelineError):
    """Nonce/ciphertext framing error or failed authentication."""


class ParseFailure(PipelineError):
    """Decrypted plaintext is malformed or addressed elsewhere."""


class KeyProvisioningError(Exception):
    """The session key could not be obtained from the device."""
