"""
Configuration Tests
===================
"""

import pytest
from pydantic import ValidationError

from intercom_notify.config import Settings, load_config


ENV_VARS = [
    "INTERCOM_CONFIG",
    "INTERCOM_DEVICE_HOST",
    "INTERCOM_USERNAME",
    "INTERCOM_PASSWORD",
    "INTERCOM_SESSION_KEY",
    "INTERCOM_LISTEN_HOST",
    "INTERCOM_LISTEN_PORTS",
    "INTERCOM_DUPLICATE_WINDOW_MS",
    "INTERCOM_API_PORT",
    "INTERCOM_LOG_LEVEL",
    "PORT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for configuration loading."""

    def test_defaults(self):
        settings = Settings()
        assert settings.listener.ports == [6524, 35344]
        assert settings.listener.duplicate_window_ms == 750
        assert settings.listener.host == "0.0.0.0"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "device:\n"
            "  host: 10.0.0.7\n"
            "  username: ghost1234\n"
            "listener:\n"
            "  ports: [7000]\n"
        )
        settings = load_config(str(path))
        assert settings.device.host == "10.0.0.7"
        assert settings.device.identity_prefix == "ghost1"
        assert settings.listener.ports == [7000]

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("device:\n  username: fromfile\n")
        monkeypatch.setenv("INTERCOM_USERNAME", "fromenv01")
        monkeypatch.setenv("INTERCOM_LISTEN_PORTS", "6524, 6525")
        monkeypatch.setenv("INTERCOM_DUPLICATE_WINDOW_MS", "500")
        monkeypatch.setenv("PORT", "9000")
        settings = load_config(str(path))
        assert settings.device.username == "fromenv01"
        assert settings.listener.ports == [6524, 6525]
        assert settings.listener.duplicate_window_ms == 500
        assert settings.server.port == 9000

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_config(str(tmp_path / "absent.yaml"))
        assert settings.listener.ports == [6524, 35344]

    @pytest.mark.parametrize("ports", [[], [0], [70000], [6524, 6524]])
    def test_invalid_ports(self, ports):
        with pytest.raises(ValidationError):
            Settings.model_validate({"listener": {"ports": ports}})


class TestSetupLogging:

    def test_caps_http_client_logs(self):
        import logging

        from intercom_notify.config import setup_logging

        setup_logging(Settings.model_validate({"logging": {"level": "INFO"}}))
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger().level == logging.INFO
