"""
IntercomNotify
==============

Listener for encrypted UDP broadcast notifications from a networked
intercom/doorbell device.

The package decodes each datagram through a fixed pipeline, suppresses
retransmitted copies, authenticates and decrypts the payload with the
device's session key, and classifies the resulting event.

Components:
    - models: Frame and event data types, drop reason codes
    - pipeline: Validation, duplicate filtering, decryption, extraction, classification
    - transport: asyncio UDP listeners (one per bound port)
    - provisioning: Session key retrieval from the device
    - main: FastAPI application and lifespan management

Example:
    from intercom_notify.pipeline import NotificationProcessor
    from intercom_notify.models import RawFrame

    processor = NotificationProcessor(key=key, expected_prefix="ABCDEF", port=6524)
    outcome = processor.process_frame(RawFrame(payload=data, source_address=addr, received_at=now))
    if outcome.event:
        print(outcome.event.kind)
"""

__version__ = "0.1.0"
__author__ = "IntercomNotify Project"

__all__ = [
    "__version__",
]
