"""
IntercomNotify Configuration
============================

This module handles configuration loading for the notification listener.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    INTERCOM_DEVICE_HOST         -> device.host
    INTERCOM_USERNAME            -> device.username
    INTERCOM_PASSWORD            -> device.password
    INTERCOM_SESSION_KEY         -> device.session_key
    INTERCOM_LISTEN_HOST         -> listener.host
    INTERCOM_LISTEN_PORTS        -> listener.ports (comma-separated)
    INTERCOM_DUPLICATE_WINDOW_MS -> listener.duplicate_window_ms
    INTERCOM_API_PORT            -> server.port
    INTERCOM_LOG_LEVEL           -> logging.level
    PORT                         -> server.port (takes precedence)

Example:
    from intercom_notify.config import settings

    print(settings.device.host)
    print(settings.listener.ports)
"""

import os
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class ServiceConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="intercom-notify", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class DeviceConfig(BaseModel):
    """Intercom device connection configuration."""

    host: str = Field(default="192.168.1.50", description="Device IP or hostname")
    username: str = Field(default="", description="Device user (identity prefix source)")
    password: str = Field(default="", description="Device password")
    session_key: Optional[str] = Field(
        default=None,
        description="Base64 session key; skips the HTTP key exchange when set",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for the session key request",
    )

    @property
    def identity_prefix(self) -> str:
        """First 6 characters of the username, as carried in notifications."""
        return self.username[:6]


class ListenerConfig(BaseModel):
    """UDP listener configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    ports: List[int] = Field(
        default_factory=lambda: [6524, 35344],
        min_length=1,
        description="UDP ports the device broadcasts to",
    )
    duplicate_window_ms: int = Field(
        default=750,
        ge=0,
        description="Window for suppressing byte-identical datagrams",
    )

    @field_validator("ports")
    @classmethod
    def _check_ports(cls, ports: List[int]) -> List[int]:
        for port in ports:
            if not 1 <= port <= 65535:
                raise ValueError(f"invalid port: {port}")
        if len(set(ports)) != len(ports):
            raise ValueError("ports must be unique")
        return ports


class ServerConfig(BaseModel):
    """Status API server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8080, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for IntercomNotify.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    device: DeviceConfig = Field(default_factory=DeviceConfig)
    listener: ListenerConfig = Field(default_factory=ListenerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        config_path = os.environ.get("INTERCOM_CONFIG")
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("/etc/intercom-notify/config.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    settings = Settings.model_validate(config_data)
    if not settings.device.identity_prefix.strip():
        logger.warning("device.username is empty; listeners will refuse to start without an identity")

    return settings


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Device settings
    if env_host := os.environ.get("INTERCOM_DEVICE_HOST"):
        config_data.setdefault("device", {})["host"] = env_host
    if env_user := os.environ.get("INTERCOM_USERNAME"):
        config_data.setdefault("device", {})["username"] = env_user
    if env_pass := os.environ.get("INTERCOM_PASSWORD"):
        config_data.setdefault("device", {})["password"] = env_pass
    if env_key := os.environ.get("INTERCOM_SESSION_KEY"):
        config_data.setdefault("device", {})["session_key"] = env_key

    # Listener settings
    if env_listen := os.environ.get("INTERCOM_LISTEN_HOST"):
        config_data.setdefault("listener", {})["host"] = env_listen
    if env_ports := os.environ.get("INTERCOM_LISTEN_PORTS"):
        config_data.setdefault("listener", {})["ports"] = [
            int(p) for p in env_ports.split(",") if p.strip()
        ]
    if env_window := os.environ.get("INTERCOM_DUPLICATE_WINDOW_MS"):
        config_data.setdefault("listener", {})["duplicate_window_ms"] = int(env_window)

    # Server settings
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("INTERCOM_API_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("INTERCOM_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


# Libraries that log every request or datagram at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"service": "intercom-notify", "module": "%(name)s", "message": "%(message)s"}'
)


def setup_logging(settings: Settings) -> None:
    """
    Configure logging based on settings.

    Replaces handlers installed before startup (uvicorn installs its own)
    so the configured format applies to every record. Per-request logs of
    the HTTP client are capped at WARNING unless DEBUG is requested.
    """
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)
    log_format = _JSON_FORMAT if settings.logging.format == "json" else _TEXT_FORMAT

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=True,
    )

    if log_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
