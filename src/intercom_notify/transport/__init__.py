"""
Transport Module
================

UDP reception for notification broadcasts.

    - PortListener: one bound port with its own pipeline context
    - NotificationListener: all configured ports
"""

from intercom_notify.transport.listener import NotificationListener, PortListener


__all__ = [
    "NotificationListener",
    "PortListener",
]
