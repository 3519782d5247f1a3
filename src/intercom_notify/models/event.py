"""
Event Models
============

Decrypted notification content and the classified event handed to
downstream consumers.

Plaintext Layout (exactly 18 bytes):
    offset 0   6 bytes   intercom identity (ASCII, space-padded)
    offset 6   8 bytes   event code (ASCII, space-padded)
    offset 14  4 bytes   UNIX timestamp, seconds, big-endian unsigned

Classification:
    The device only ever announces motion explicitly. Every other event
    code is treated as a doorbell ring. OTHER exists for codes that are
    mapped explicitly by configuration.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EventKind(str, Enum):
    """
    Kinds of classified notification events.

    Attributes:
        MOTION: Motion sensor triggered
        DOORBELL: Doorbell button pressed (also the fallback for unknown codes)
        OTHER: Explicitly mapped code that is neither motion nor doorbell
    """

    MOTION = "MOTION"
    DOORBELL = "DOORBELL"
    OTHER = "OTHER"


@dataclass(frozen=True, slots=True)
class DecryptedEvent:
    """
    Structured view of an 18-byte decrypted plaintext.

    Attributes:
        intercom_id: Receiver identity (trimmed)
        event_code: Event code (trimmed of padding)
        timestamp: Seconds since the UNIX epoch (u32, not range checked)
    """

    intercom_id: str
    event_code: str
    timestamp: int

    @property
    def occurred_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


class ClassifiedEvent(BaseModel):
    """
    Event emitted to the external handler.

    This is the output contract of the pipeline.
    """

    kind: EventKind = Field(..., description="Classified event kind")
    event_code: str = Field(..., description="Event code as sent by the device")
    intercom_id: str = Field(..., description="Identity the event was addressed to")
    timestamp: int = Field(..., ge=0, le=0xFFFFFFFF, description="Device UNIX timestamp (seconds)")
    occurred_at: datetime = Field(..., description="Device timestamp as UTC datetime")
    port: Optional[int] = Field(default=None, description="Local port the frame arrived on")
    source_address: Optional[str] = Field(default=None, description="Sender host:port")

    model_config = {
        "json_schema_extra": {
            "example": {
                "kind": "MOTION",
                "event_code": "motion",
                "intercom_id": "ABCDEF",
                "timestamp": 1707321234,
                "occurred_at": "2024-02-07T15:53:54Z",
                "port": 6524,
                "source_address": "192.168.1.20:6524",
            }
        }
    }
