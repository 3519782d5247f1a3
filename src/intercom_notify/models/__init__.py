"""
Data Models
===========

Data types for the notification pipeline.

Models:
    Frame:
        - RawFrame: One received datagram
        - FrameHeader: Parsed identifier + version
        - CipherSection: Nonce + ciphertext/tag slices

    Event:
        - DecryptedEvent: Parsed plaintext record
        - EventKind: MOTION, DOORBELL, OTHER
        - ClassifiedEvent: Output contract handed to event handlers

    Reasons:
        - DropReason: Why a frame produced no event
"""

from intercom_notify.models.frame import CipherSection, FrameHeader, RawFrame
from intercom_notify.models.event import ClassifiedEvent, DecryptedEvent, EventKind
from intercom_notify.models.reason_codes import DropReason

__all__ = [
    # Frame
    "RawFrame",
    "FrameHeader",
    "CipherSection",
    # Event
    "DecryptedEvent",
    "EventKind",
    "ClassifiedEvent",
    # Reasons
    "DropReason",
]
