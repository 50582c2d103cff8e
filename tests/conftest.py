"""Pytest configuration and fixtures for the Whiteboard sync client.

The backend is an httpx.MockTransport (FakeBackend) so no test touches the
network. Storage is in-memory unless a test asks for SQL explicitly, and
time comes from FakeClock so TTL and backoff are deterministic.
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from tests.fakes import BACKEND_URL, TEST_TOKEN, TTL_MS, FakeBackend, FakeClock
from whiteboard.application.services import (
    ConnectivityMonitor,
    LocalCacheStore,
    PendingActionQueue,
    ReplayService,
    RequestGateway,
    WhiteboardClient,
)
from whiteboard.core.config import Settings
from whiteboard.infrastructure.http import HttpxTransport
from whiteboard.infrastructure.security import StaticTokenProvider
from whiteboard.infrastructure.storage import MemoryStorage


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def http_client(backend: FakeBackend):
    """httpx client whose requests are answered by FakeBackend."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(backend.handler)) as client:
        yield client


@pytest.fixture
def transport(http_client: httpx.AsyncClient) -> HttpxTransport:
    return HttpxTransport(BACKEND_URL, timeout=5.0, client=http_client)


@pytest.fixture
def connectivity() -> ConnectivityMonitor:
    return ConnectivityMonitor(online=True)


@pytest.fixture
def cache_store(storage: MemoryStorage, clock: FakeClock) -> LocalCacheStore:
    return LocalCacheStore(storage, ttl_ms=TTL_MS, clock=clock)


@pytest.fixture
def action_queue(storage: MemoryStorage, clock: FakeClock) -> PendingActionQueue:
    return PendingActionQueue(storage, clock=clock)


@pytest.fixture
def gateway(
    transport: HttpxTransport,
    cache_store: LocalCacheStore,
    action_queue: PendingActionQueue,
    connectivity: ConnectivityMonitor,
) -> RequestGateway:
    return RequestGateway(
        transport, cache_store, action_queue, connectivity, StaticTokenProvider(TEST_TOKEN)
    )


@pytest.fixture
def replay_service(
    gateway: RequestGateway,
    action_queue: PendingActionQueue,
    connectivity: ConnectivityMonitor,
    clock: FakeClock,
) -> ReplayService:
    return ReplayService(
        gateway,
        action_queue,
        connectivity,
        max_attempts=3,
        backoff_base_ms=1_000,
        backoff_max_ms=4_000,
        clock=clock,
    )


@pytest.fixture
def whiteboard_client(gateway: RequestGateway) -> WhiteboardClient:
    return WhiteboardClient(gateway)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        server_url=BACKEND_URL,
        start_online=True,
        connectivity_probe_enabled=False,
        telemetry_enabled=False,
    )


@pytest.fixture
async def app(settings: Settings, storage: MemoryStorage, http_client: httpx.AsyncClient):
    """Sync agent app with services wired on in-memory storage and FakeBackend."""
    from whiteboard.core.lifespan import wire_services
    from whiteboard.main import create_app

    application = create_app()
    wire_services(application, settings, storage, http_client=http_client)
    yield application
    application.state.replay_service.detach()


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the sync agent (ASGI)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
