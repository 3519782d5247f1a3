"""
Duplicate Filter
================

Suppresses byte-identical datagrams that arrive within a short window.

Broadcast networks routinely deliver the same notification several times.
Comparison is over the full raw datagram so retransmissions are discarded
before any decryption work is done.

Window Semantics:
    The cache is updated after EVERY comparison, duplicate or not. The
    window therefore slides: each received copy extends suppression by
    another window_ms, not just the first copy.

State:
    One DuplicateCacheEntry per listening socket. Frames on different
    ports are never compared with each other.
"""

import logging
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)


DEFAULT_WINDOW_MS = 750


@dataclass(slots=True)
class DuplicateCacheEntry:
    """Most recent frame seen on one socket."""

    last_payload: Optional[bytes] = None
    last_seen_at: Optional[float] = None


def is_duplicate(
    cache: DuplicateCacheEntry,
    payload: bytes,
    now: float,
    window_ms: int = DEFAULT_WINDOW_MS,
) -> bool:
    """
    Compare a datagram against the cache and record it.

    Args:
        cache: Per-socket cache entry (mutated)
        payload: Raw datagram bytes
        now: Receipt time in seconds
        window_ms: Suppression window in milliseconds

    Returns:
        True if the caller must drop the frame.
    """
    duplicate = (
        cache.last_payload is not None
        and cache.last_seen_at is not None
        and cache.last_payload == payload
        and (now - cache.last_seen_at) * 1000.0 < window_ms
    )

    cache.last_payload = bytes(payload)
    cache.last_seen_at = now

    return duplicate


class DuplicateFilter:
    """
    Duplicate suppression for a single listening socket.

    Attributes:
        socket_id: Identifier of the owning socket (the bound port)
        window_ms: Suppression window in milliseconds
        suppressed_count: Number of frames suppressed so far

    Example:
        dedup = DuplicateFilter(socket_id=6524)
        if dedup.check(frame.payload, frame.received_at):
            return  # drop
    """

    def __init__(self, socket_id: int, window_ms: int = DEFAULT_WINDOW_MS) -> None:
        if window_ms < 0:
            raise ValueError("window_ms must be >= 0")

        self.socket_id = socket_id
        self.window_ms = window_ms
        self.entry = DuplicateCacheEntry()
        self._suppressed_count: int = 0

    @property
    def suppressed_count(self) -> int:
        return self._suppressed_count

    def check(self, payload: bytes, now: float) -> bool:
        """Return True if payload repeats the previous frame within the window."""
        if is_duplicate(self.entry, payload, now, self.window_ms):
            self._suppressed_count += 1
            logger.debug(
                f"Duplicate frame suppressed on socket {self.socket_id} "
                f"(total {self._suppressed_count})"
            )
            return True
        return False

    def reset(self) -> None:
        self.entry = DuplicateCacheEntry()
        self._suppressed_count = 0
