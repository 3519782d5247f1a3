"""
Event Classifier
================

Maps a decrypted event code to an EventKind.

Matching is case-insensitive on the trimmed code. Only "motion" has an
explicit mapping by default; every other code, including the empty one,
falls back to DOORBELL. The fallback and additional codes are
configurable so newer firmware codes can be mapped without changing
the default behavior.
"""

from typing import Any, Dict, Mapping, Optional

from intercom_notify.models.event import ClassifiedEvent, DecryptedEvent, EventKind
from intercom_notify.models.frame import format_address


DEFAULT_CODE_MAP: Dict[str, EventKind] = {
    "motion": EventKind.MOTION,
}


class EventClassifier:
    """
    Event code classifier.

    Attributes:
        code_map: Lower-case event code -> EventKind
        fallback: Kind used for codes not in code_map
    """

    def __init__(
        self,
        code_map: Optional[Mapping[str, EventKind]] = None,
        fallback: EventKind = EventKind.DOORBELL,
    ) -> None:
        merged = dict(DEFAULT_CODE_MAP)
        if code_map:
            merged.update({code.strip().lower(): kind for code, kind in code_map.items()})
        self.code_map = merged
        self.fallback = fallback

    def kind_of(self, event_code: str) -> EventKind:
        return self.code_map.get(event_code.strip().lower(), self.fallback)

    def classify(
        self,
        event: DecryptedEvent,
        port: Optional[int] = None,
        source_address: Any = None,
    ) -> ClassifiedEvent:
        """Build the output event for a decrypted record."""
        return ClassifiedEvent(
            kind=self.kind_of(event.event_code),
            event_code=event.event_code,
            intercom_id=event.intercom_id,
            timestamp=event.timestamp,
            occurred_at=event.occurred_at,
            port=port,
            source_address=format_address(source_address) if source_address is not None else None,
        )
