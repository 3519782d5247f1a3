#!/usr/bin/env python3
"""
Test Notification Sender
========================

Standalone script that emits a synthetic encrypted notification.

This script:
    1. Packs an 18-byte plaintext (identity, event code, timestamp)
    2. Encrypts it with the given session key and a random nonce
    3. Sends the frame over UDP (optionally as a broadcast), repeated
       to mimic the device's retransmissions

Usage:
    python scripts/send_test_notification.py --key <base64> --identity abcdef --event motion
    python scripts/send_test_notification.py --key <base64> --identity abcdef --broadcast --repeat 3
"""

import argparse
import logging
import os
import socket
import sys
import time

import nacl.utils

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from intercom_notify.models.frame import NONCE_SIZE
from intercom_notify.pipeline import build_frame, encrypt_body, pack_event
from intercom_notify.provisioning import decode_session_key


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def build_notification(key: bytes, identity: str, event_code: str, timestamp: int) -> bytes:
    """Encrypt one notification under a fresh random nonce."""
    plaintext = pack_event(identity[:6], event_code, timestamp)
    body = encrypt_body(plaintext, nacl.utils.random(NONCE_SIZE), key)
    return build_frame(body[:NONCE_SIZE], body[NONCE_SIZE:])


def send(frame: bytes, host: str, ports: list, broadcast: bool, repeat: int, interval: float) -> int:
    sent = 0
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        if broadcast:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        for i in range(repeat):
            for port in ports:
                sock.sendto(frame, (host, port))
                sent += 1
                logger.info(f"Sent {len(frame)} bytes to {host}:{port} (copy {i + 1}/{repeat})")
            if i + 1 < repeat:
                time.sleep(interval)
    return sent


def main():
    parser = argparse.ArgumentParser(
        description="Send a synthetic encrypted intercom notification"
    )
    parser.add_argument(
        "--key",
        type=str,
        default=os.environ.get("INTERCOM_SESSION_KEY"),
        help="Base64 session key (default: $INTERCOM_SESSION_KEY)",
    )
    parser.add_argument(
        "--identity",
        type=str,
        default=os.environ.get("INTERCOM_USERNAME", ""),
        help="Receiver identity; first 6 characters are used",
    )
    parser.add_argument(
        "--event",
        type=str,
        default="doorbell",
        help="Event code, at most 8 ASCII characters (default: doorbell)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="255.255.255.255",
        help="Destination address (default: 255.255.255.255)",
    )
    parser.add_argument(
        "--port",
        type=int,
        action="append",
        help="Destination port, may be repeated (default: 6524 and 35344)",
    )
    parser.add_argument(
        "--broadcast",
        action="store_true",
        help="Enable SO_BROADCAST on the sending socket",
    )
    parser.add_argument(
        "--repeat",
        type=int,
        default=1,
        help="Copies to send per port (default: 1)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=0.1,
        help="Seconds between copies (default: 0.1)",
    )

    args = parser.parse_args()

    if not args.key:
        parser.error("--key or INTERCOM_SESSION_KEY is required")

    key = decode_session_key(args.key)
    frame = build_notification(key, args.identity, args.event, int(time.time()))
    send(
        frame,
        host=args.host,
        ports=args.port or [6524, 35344],
        broadcast=args.broadcast or args.host.endswith(".255"),
        repeat=args.repeat,
        interval=args.interval,
    )


if __name__ == "__main__":
    main()
