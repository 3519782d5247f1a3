"""
IntercomNotify Main Application
===============================

FastAPI entry point for the notification listener.

Startup:
    1. Obtain the session key (configured or fetched from the device)
    2. Bind one UDP listener per configured port
    3. Decode, filter and classify every datagram; record emitted events

Endpoints:
    GET  /          - Service information
    GET  /health    - Liveness probe (is process alive?)
    GET  /ready     - Readiness probe (key held + all ports bound?)
    GET  /metrics   - Per-port pipeline metrics
    GET  /events    - Most recent classified events
"""

import logging
import os
import time
from collections import deque
from contextlib import asynccontextmanager
from typing import AsyncIterator, Deque, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from intercom_notify.config import settings
from intercom_notify.errors import KeyProvisioningError
from intercom_notify.models.event import ClassifiedEvent
from intercom_notify.pipeline import NotificationProcessor
from intercom_notify.provisioning import SessionKeyClient, decode_session_key
from intercom_notify.transport import NotificationListener


logger = logging.getLogger(__name__)


RECENT_EVENTS_LIMIT = 100


# =============================================================================
# Global State
# =============================================================================

_session_key: Optional[bytes] = None
_listener: Optional[NotificationListener] = None
_recent_events: Deque[ClassifiedEvent] = deque(maxlen=RECENT_EVENTS_LIMIT)
_startup_time: float = 0.0


# =============================================================================
# Getters
# =============================================================================

def get_listener() -> Optional[NotificationListener]:
    return _listener

def get_recent_events() -> list:
    return list(_recent_events)

def is_ready() -> bool:
    return _session_key is not None and _listener is not None and _listener.running


# =============================================================================
# Event Handling
# =============================================================================

def handle_event(event: ClassifiedEvent) -> None:
    """Record an emitted event for the status API."""
    _recent_events.append(event)
    logger.info(
        f"Event: {event.kind.value} code={event.event_code} "
        f"timestamp={event.occurred_at.isoformat()}"
    )


async def obtain_session_key() -> bytes:
    """
    Resolve the session key from config or the device.

    Raises:
        KeyProvisioningError: the key is unavailable (fatal)
    """
    if settings.device.session_key:
        logger.info("Using configured session key")
        return decode_session_key(settings.device.session_key)

    client = SessionKeyClient(
        host=settings.device.host,
        username=settings.device.username,
        password=settings.device.password,
        timeout=settings.device.request_timeout_seconds,
    )
    return await client.fetch_session_key()


def create_listener(key: bytes) -> NotificationListener:
    """Build listeners with one pipeline context per port."""
    def processor_for(port: int) -> NotificationProcessor:
        return NotificationProcessor(
            key=key,
            expected_prefix=settings.device.identity_prefix,
            port=port,
            window_ms=settings.listener.duplicate_window_ms,
            on_event=handle_event,
        )

    return NotificationListener(
        host=settings.listener.host,
        ports=settings.listener.ports,
        processor_factory=processor_for,
    )


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager with graceful shutdown."""
    global _session_key, _listener, _startup_time

    # Startup
    _startup_time = time.time()
    logger.info(f"Starting {settings.service.name} {settings.service.version}")

    try:
        _session_key = await obtain_session_key()
    except KeyProvisioningError as e:
        logger.error(f"Failed to obtain encryption key: {e}")
        raise

    _listener = create_listener(_session_key)
    await _listener.start()

    logger.info(f"Listening on ports {settings.listener.ports}")

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")

    if _listener:
        _listener.stop()

    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="IntercomNotify",
    description="Encrypted intercom notification listener",
    version=settings.service.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "IntercomNotify",
        "version": settings.service.version,
        "name": settings.service.name,
        "status": "running",
        "ports": settings.listener.ports,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/ready")
async def ready() -> JSONResponse:
    """
    Readiness probe.

    Returns 200 once the session key is held and every port is bound.
    Returns 503 otherwise.
    """
    listener = get_listener()
    body = {
        "key_loaded": _session_key is not None,
        "listening": listener.running if listener else False,
    }

    if is_ready():
        return JSONResponse({"status": "ready", **body})
    return JSONResponse({"status": "not_ready", **body}, status_code=503)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Per-port metrics for observability."""
    listener = get_listener()

    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "events_buffered": len(_recent_events),
        "ports": listener.metrics() if listener else {},
    })


@app.get("/events")
async def events() -> JSONResponse:
    """Most recent classified events, oldest first."""
    return JSONResponse([
        event.model_dump(mode="json") for event in get_recent_events()
    ])


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "intercom_notify.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
