"""Application services: gateway, cache, queue, replay and resource client."""

from whiteboard.application.services.action_queue import PendingActionQueue
from whiteboard.application.services.cache_store import LocalCacheStore
from whiteboard.application.services.connectivity import ConnectivityMonitor
from whiteboard.application.services.replay_service import (
    ReplayReport,
    ReplayService,
    classify_failure,
)
from whiteboard.application.services.request_gateway import RequestGateway
from whiteboard.application.services.resource_client import (
    WhiteboardClient,
    build_query_string,
)

__all__ = [
    "ConnectivityMonitor",
    "LocalCacheStore",
    "PendingActionQueue",
    "ReplayReport",
    "ReplayService",
    "RequestGateway",
    "WhiteboardClient",
    "build_query_string",
    "classify_failure",
]
