"""
Session Key Provisioning Tests
==============================
"""

import asyncio
import base64

import httpx
import pytest

from intercom_notify.errors import KeyProvisioningError
from intercom_notify.provisioning import SessionKeyClient, decode_session_key


RAW_KEY = bytes(range(48))


def _client(handler) -> SessionKeyClient:
    return SessionKeyClient(
        host="192.168.1.50",
        username="abcdef0001",
        password="secret",
        transport=httpx.MockTransport(handler),
    )


class TestSessionKeyClient:
    """Tests for the key exchange."""

    def test_fetches_first_32_bytes(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={
                "BHA": {
                    "RETURNCODE": "1",
                    "SESSIONID": "abc",
                    "NOTIFICATION_ENCRYPTION_KEY": base64.b64encode(RAW_KEY).decode(),
                }
            })

        key = asyncio.run(_client(handler).fetch_session_key())
        assert key == RAW_KEY[:32]
        assert seen["url"] == "http://192.168.1.50/bha-api/getsession.cgi"
        assert seen["auth"] == "Basic " + base64.b64encode(b"abcdef0001:secret").decode()

    def test_http_error_status(self):
        client = _client(lambda request: httpx.Response(401))
        with pytest.raises(KeyProvisioningError, match="401"):
            asyncio.run(client.fetch_session_key())

    def test_missing_field(self):
        client = _client(lambda request: httpx.Response(200, json={"BHA": {}}))
        with pytest.raises(KeyProvisioningError):
            asyncio.run(client.fetch_session_key())

    def test_not_json(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(KeyProvisioningError):
            asyncio.run(client.fetch_session_key())

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(KeyProvisioningError):
            asyncio.run(_client(handler).fetch_session_key())


class TestDecodeSessionKey:

    def test_exact_length(self):
        assert decode_session_key(base64.b64encode(bytes(32)).decode()) == bytes(32)

    def test_too_short(self):
        with pytest.raises(KeyProvisioningError):
            decode_session_key(base64.b64encode(bytes(16)).decode())

    def test_not_base64(self):
        with pytest.raises(KeyProvisioningError):
            decode_session_key("not base64!!")
