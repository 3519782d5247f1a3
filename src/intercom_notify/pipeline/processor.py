"""
Notification Processor
======================

Per-port listener context that runs a datagram through the full pipeline:

    RawFrame -> validate -> duplicate filter -> decrypt -> extract -> classify -> on_event

Design Rules:
    - process_frame never raises for per-frame failures; it returns a
      FrameOutcome carrying either the event or the DropReason
    - The duplicate cache is the only state carried between frames and is
      owned by this object (one processor per bound port)
    - The on_event hand-off is the only side effect beyond the cache;
      handler errors are logged and counted, never propagated
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from intercom_notify.errors import PipelineError
from intercom_notify.models.event import ClassifiedEvent
from intercom_notify.models.frame import RawFrame, format_address
from intercom_notify.models.reason_codes import DropReason
from intercom_notify.pipeline.classifier import EventClassifier
from intercom_notify.pipeline.crypto import AeadDecryptor
from intercom_notify.pipeline.dedup import DEFAULT_WINDOW_MS, DuplicateFilter
from intercom_notify.pipeline.extractor import expected_prefix_for, extract_event
from intercom_notify.pipeline.validator import validate_frame


logger = logging.getLogger(__name__)


EventHandler = Callable[[ClassifiedEvent], None]

# Expected on shared broadcast media; logged quietly
_QUIET_REASONS = frozenset({
    DropReason.DUPLICATE,
    DropReason.AUTHENTICATION_FAILED,
})


@dataclass(frozen=True, slots=True)
class FrameOutcome:
    """Result of processing one frame: an event or a drop reason."""

    event: Optional[ClassifiedEvent] = None
    reason: Optional[DropReason] = None

    @property
    def accepted(self) -> bool:
        return self.event is not None


class ProcessorMetrics:
    """Metrics for NotificationProcessor observability."""

    __slots__ = (
        "frames_received",
        "events_emitted",
        "handler_errors",
        "dropped",
    )

    def __init__(self) -> None:
        self.frames_received: int = 0
        self.events_emitted: int = 0
        self.handler_errors: int = 0
        self.dropped: Dict[DropReason, int] = {reason: 0 for reason in DropReason}

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "frames_received": self.frames_received,
            "events_emitted": self.events_emitted,
            "handler_errors": self.handler_errors,
            "dropped": {reason.value: count for reason, count in self.dropped.items()},
        }


class NotificationProcessor:
    """
    Decode pipeline for one listening port.

    Attributes:
        port: Local port this context belongs to
        expected_prefix: Receiver identity prefix (first 6 characters)
        metrics: Operational metrics

    Example:
        processor = NotificationProcessor(
            key=session_key,
            expected_prefix=settings.device.username,
            port=6524,
            on_event=handle_event,
        )
        outcome = processor.process_frame(frame)
    """

    def __init__(
        self,
        key: bytes,
        expected_prefix: str,
        port: int,
        window_ms: int = DEFAULT_WINDOW_MS,
        on_event: Optional[EventHandler] = None,
        classifier: Optional[EventClassifier] = None,
    ) -> None:
        """
        Initialize processor.

        Args:
            key: 32-byte session key
            expected_prefix: Receiver identity; only its first 6 characters are used.
                Must not be blank: an empty prefix would match space-padded identities
            port: Local port (scopes the duplicate cache)
            window_ms: Duplicate suppression window
            on_event: Called with every classified event
            classifier: Event classifier (default: motion vs doorbell)
        """
        self.port = port
        self.expected_prefix = expected_prefix_for(expected_prefix)
        if not self.expected_prefix:
            raise ValueError("expected_prefix must contain a receiver identity")
        self.on_event = on_event

        self._decryptor = AeadDecryptor(key)
        self._dedup = DuplicateFilter(socket_id=port, window_ms=window_ms)
        self._classifier = classifier or EventClassifier()

        self.metrics = ProcessorMetrics()

    def process_frame(self, frame: RawFrame) -> FrameOutcome:
        """
        Run one datagram through the pipeline.

        Args:
            frame: Datagram received on this port

        Returns:
            FrameOutcome with the emitted event, or the reason it was dropped
        """
        self.metrics.frames_received += 1

        try:
            event = self._decode(frame)
        except PipelineError as e:
            self.metrics.dropped[e.reason] += 1
            level = logging.DEBUG if e.reason in _QUIET_REASONS else logging.INFO
            logger.log(
                level,
                f"Dropped frame from {format_address(frame.source_address)} "
                f"on port {self.port}: {e.reason.value} ({e})",
            )
            return FrameOutcome(reason=e.reason)

        self.metrics.events_emitted += 1
        logger.debug(
            f"Event {event.kind.value} (code={event.event_code!r}) "
            f"at {event.occurred_at.isoformat()} on port {self.port}"
        )
        self._emit(event)
        return FrameOutcome(event=event)

    def _decode(self, frame: RawFrame) -> ClassifiedEvent:
        validate_frame(frame)

        if self._dedup.check(frame.payload, frame.received_at):
            raise PipelineError(DropReason.DUPLICATE)

        plaintext = self._decryptor.decrypt(frame.body)
        decrypted = extract_event(plaintext, self.expected_prefix)

        return self._classifier.classify(
            decrypted,
            port=self.port,
            source_address=frame.source_address,
        )

    def _emit(self, event: ClassifiedEvent) -> None:
        if self.on_event is None:
            return
        try:
            self.on_event(event)
        except Exception as e:
            self.metrics.handler_errors += 1
            logger.error(f"Event handler error (port={self.port}): {e}")

    def reset(self) -> None:
        """Forget the duplicate cache and metrics."""
        self._dedup.reset()
        self.metrics = ProcessorMetrics()
