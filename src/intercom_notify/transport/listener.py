"""
UDP Listener
============

asyncio datagram endpoints that receive notification broadcasts.

This module provides:
    - PortListener: one bound UDP socket feeding its own NotificationProcessor
    - NotificationListener: the set of PortListeners for all configured ports

Design Rules:
    - Each port is processed sequentially, in receipt order, on the event loop
    - Each port owns its processor and therefore its duplicate cache
    - Per-frame failures never stop a listener
"""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from intercom_notify.models.frame import RawFrame
from intercom_notify.pipeline.processor import NotificationProcessor


logger = logging.getLogger(__name__)


ProcessorFactory = Callable[[int], NotificationProcessor]


class _NotificationProtocol(asyncio.DatagramProtocol):
    """Hands each datagram to the owning PortListener."""

    def __init__(self, listener: "PortListener") -> None:
        self._listener = listener

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        self._listener.handle_datagram(data, addr)

    def error_received(self, exc: Exception) -> None:
        logger.warning(f"Socket error on port {self._listener.port}: {exc}")


class PortListener:
    """
    One bound UDP port.

    Attributes:
        host: Bind address
        port: Requested port (0 = ephemeral)
        processor: Pipeline context for this port
        bound_port: Actual port after start()
    """

    def __init__(
        self,
        host: str,
        port: int,
        processor: NotificationProcessor,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.processor = processor
        # Duplicate windows are relative; wall clock steps must not affect them
        self._clock = clock or time.monotonic
        self._transport: Optional[asyncio.DatagramTransport] = None
        self.bound_port: Optional[int] = None
        self.datagram_errors: int = 0

    @property
    def running(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    async def start(self) -> None:
        """Bind the socket with broadcast reception enabled."""
        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            lambda: _NotificationProtocol(self),
            local_addr=(self.host, self.port),
            allow_broadcast=True,
        )
        self._transport = transport
        self.bound_port = transport.get_extra_info("sockname")[1]
        logger.info(f"Listening for UDP broadcasts on {self.host}:{self.bound_port}")

    def stop(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            logger.info(f"Stopped listening on port {self.bound_port}")

    def handle_datagram(self, data: bytes, addr: Tuple[str, int]) -> None:
        frame = RawFrame(payload=bytes(data), source_address=addr, received_at=self._clock())
        try:
            self.processor.process_frame(frame)
        except Exception as e:
            # process_frame reports frame failures as outcomes
            self.datagram_errors += 1
            logger.error(f"Unexpected error processing datagram on port {self.port}: {e}")


class NotificationListener:
    """
    Listeners for every configured port.

    Example:
        listener = NotificationListener(
            host="0.0.0.0",
            ports=[6524, 35344],
            processor_factory=lambda port: NotificationProcessor(key, "ABCDEF", port),
        )
        await listener.start()
        ...
        listener.stop()
    """

    def __init__(
        self,
        host: str,
        ports: List[int],
        processor_factory: ProcessorFactory,
    ) -> None:
        if not ports:
            raise ValueError("at least one port is required")

        self.host = host
        self.ports = list(ports)
        self.listeners: List[PortListener] = [
            PortListener(host, port, processor_factory(port)) for port in self.ports
        ]

    @property
    def running(self) -> bool:
        return all(listener.running for listener in self.listeners)

    async def start(self) -> None:
        try:
            for listener in self.listeners:
                await listener.start()
        except OSError:
            self.stop()
            raise

    def stop(self) -> None:
        for listener in self.listeners:
            listener.stop()

    def metrics(self) -> Dict[str, dict]:
        """Per-port processor metrics keyed by port."""
        return {
            str(listener.bound_port or listener.port): {
                "running": listener.running,
                "datagram_errors": listener.datagram_errors,
                **listener.processor.metrics.to_dict(),
            }
            for listener in self.listeners
        }
