"""
Pipeline Module
===============

Notification decode pipeline, one module per stage:
    - validator: Header + minimum length check
    - dedup: Per-socket duplicate suppression
    - crypto: ChaCha20-Poly1305 authenticated decryption
    - extractor: 18-byte plaintext parsing + identity check
    - classifier: Event code -> EventKind
    - processor: Per-port context running all stages

Example:
    from intercom_notify.pipeline import NotificationProcessor

    processor = NotificationProcessor(key=key, expected_prefix="ABCDEF", port=6524)
    outcome = processor.process_frame(frame)
"""

from intercom_notify.pipeline.validator import build_frame, validate_frame
from intercom_notify.pipeline.dedup import DuplicateCacheEntry, DuplicateFilter, is_duplicate
from intercom_notify.pipeline.crypto import AeadDecryptor, encrypt_body
from intercom_notify.pipeline.extractor import extract_event, pack_event
from intercom_notify.pipeline.classifier import EventClassifier
from intercom_notify.pipeline.processor import (
    FrameOutcome,
    NotificationProcessor,
    ProcessorMetrics,
)


__all__ = [
    "validate_frame",
    "build_frame",
    "DuplicateCacheEntry",
    "DuplicateFilter",
    "is_duplicate",
    "AeadDecryptor",
    "encrypt_body",
    "extract_event",
    "pack_event",
    "EventClassifier",
    "FrameOutcome",
    "NotificationProcessor",
    "ProcessorMetrics",
]
