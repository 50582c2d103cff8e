"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of the storage backend, the HTTP transport, the
sync services, the connectivity probe and telemetry. Services live on
app.state (one instance per process, no module-level singletons).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from whiteboard.application.services import (
    ConnectivityMonitor,
    LocalCacheStore,
    PendingActionQueue,
    ReplayService,
    RequestGateway,
    WhiteboardClient,
)
from whiteboard.core.config import Settings, get_settings
from whiteboard.domain.enums import ReplayPolicy
from whiteboard.infrastructure.connectivity import ConnectivityProbe
from whiteboard.infrastructure.http import HttpxTransport
from whiteboard.infrastructure.security import StorageTokenProvider
from whiteboard.infrastructure.storage import StorageBackend, StorageFactory
from whiteboard.shared.telemetry.telemetry import TelemetryConfig

logger = logging.getLogger(__name__)


def wire_services(
    app: FastAPI,
    settings: Settings,
    storage: StorageBackend,
    http_client: httpx.AsyncClient | None = None,
) -> None:
    """Construct the sync services on a connected storage and attach them to app.state.

    Args:
        app: FastAPI app whose state receives the services.
        settings: Application settings.
        storage: Connected key-value storage.
        http_client: Optional shared httpx client (tests pass a MockTransport client).
    """
    connectivity = ConnectivityMonitor(online=settings.start_online)
    cache = LocalCacheStore(storage, ttl_ms=settings.cache_ttl_ms)
    queue = PendingActionQueue(storage)
    transport = HttpxTransport(
        settings.server_url, timeout=settings.request_timeout_seconds, client=http_client
    )
    token_provider = StorageTokenProvider(
        storage,
        fallback=settings.access_token.get_secret_value() if settings.access_token else None,
    )
    gateway = RequestGateway(transport, cache, queue, connectivity, token_provider)
    replay = ReplayService(
        gateway,
        queue,
        connectivity,
        policy=ReplayPolicy(settings.replay_policy),
        max_attempts=settings.replay_max_attempts,
        backoff_base_ms=int(settings.replay_backoff_base_seconds * 1000),
        backoff_max_ms=int(settings.replay_backoff_max_seconds * 1000),
    )
    replay.attach()

    app.state.storage = storage
    app.state.connectivity = connectivity
    app.state.cache_store = cache
    app.state.action_queue = queue
    app.state.transport = transport
    app.state.token_provider = token_provider
    app.state.gateway = gateway
    app.state.replay_service = replay
    app.state.whiteboard_client = WhiteboardClient(gateway)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), storage connect, services,
    connectivity probe (if enabled). Shutdown runs in reverse: probe stop,
    replay detach, transport close, storage disconnect, telemetry shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    telemetry: TelemetryConfig | None = None
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_app(app)
    app.state.telemetry = telemetry

    storage = StorageFactory.create_storage(settings)
    await storage.connect()
    if telemetry is not None:
        telemetry.instrument_storage(settings.storage_backend, storage)
    logger.info("Storage backend connected: %s", settings.storage_backend)

    wire_services(app, settings, storage)

    app.state.connectivity_probe = None
    if settings.connectivity_probe_enabled:
        probe = ConnectivityProbe(
            app.state.connectivity,
            app.state.transport.url_for(settings.health_path),
            interval=settings.connectivity_probe_interval_seconds,
            timeout=settings.connectivity_probe_timeout_seconds,
        )
        probe.start()
        app.state.connectivity_probe = probe

    yield

    # ---- Shutdown ----
    probe = getattr(app.state, "connectivity_probe", None)
    if probe is not None:
        await probe.stop()
        app.state.connectivity_probe = None
        logger.info("Connectivity probe stopped")

    app.state.replay_service.detach()
    await app.state.transport.aclose()
    logger.info("HTTP transport closed")

    await storage.disconnect()
    logger.info("Storage disconnected")

    if telemetry is not None:
        telemetry.shutdown()
        logger.info("Telemetry shutdown complete")
