"""
Session Key Provisioning
========================

Retrieves the notification encryption key from the device.

Exchange:
    GET http://<host>/bha-api/getsession.cgi  (HTTP Basic auth)
    -> {"BHA": {"NOTIFICATION_ENCRYPTION_KEY": "<base64>"}, ...}

The decoded key is truncated to its first 32 bytes. Any failure raises
KeyProvisioningError; without a key the service cannot decode anything,
so callers treat it as fatal.
"""

import base64
import binascii
import logging
from typing import Optional

import httpx

from intercom_notify.errors import KeyProvisioningError
from intercom_notify.pipeline.crypto import KEY_SIZE


logger = logging.getLogger(__name__)


SESSION_PATH = "/bha-api/getsession.cgi"


def decode_session_key(key_b64: str) -> bytes:
    """Decode a base64 session key and keep the first 32 bytes."""
    try:
        key = base64.b64decode(key_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyProvisioningError(f"Session key is not valid base64: {e}") from e

    if len(key) < KEY_SIZE:
        raise KeyProvisioningError(
            f"Session key is {len(key)} bytes, need at least {KEY_SIZE}"
        )
    return key[:KEY_SIZE]


class SessionKeyClient:
    """
    HTTP client for the device session endpoint.

    Example:
        client = SessionKeyClient("192.168.1.50", "abcdef0001", "secret")
        key = await client.fetch_session_key()
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.host = host
        self.username = username
        self.password = password
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"http://{self.host}{SESSION_PATH}"

    async def fetch_session_key(self) -> bytes:
        """
        Fetch and decode the session key.

        Returns:
            32-byte key

        Raises:
            KeyProvisioningError: on any transport, status or format problem
        """
        try:
            async with httpx.AsyncClient(
                auth=httpx.BasicAuth(self.username, self.password),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(self.url)
        except httpx.HTTPError as e:
            raise KeyProvisioningError(f"Error contacting {self.url}: {e}") from e

        if response.is_error:
            raise KeyProvisioningError(
                f"Error fetching encryption key: {response.status_code} {response.reason_phrase}"
            )

        try:
            key_b64 = response.json()["BHA"]["NOTIFICATION_ENCRYPTION_KEY"]
        except (ValueError, KeyError, TypeError) as e:
            raise KeyProvisioningError(f"Unexpected session response: {e}") from e

        key = decode_session_key(str(key_b64))
        logger.info("Encryption key obtained")
        return key
