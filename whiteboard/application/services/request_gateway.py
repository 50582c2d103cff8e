"""Request gateway: mediates every backend call.

Decides between the network, the local cache and the pending action queue
from the connectivity state, attaches the bearer token, and returns an
ApiResponse for every outcome. Expected conditions (offline, network
error, server error) are results, never exceptions; unexpected exceptions
are logged and converted to UNKNOWN_ERROR here.
"""

from __future__ import annotations

import logging
from typing import Any

from whiteboard.application.interfaces.services import ITokenProvider, ITransport
from whiteboard.application.services.action_queue import PendingActionQueue
from whiteboard.application.services.cache_store import LocalCacheStore
from whiteboard.application.services.connectivity import ConnectivityMonitor
from whiteboard.core.constants import (
    MSG_ACTION_QUEUED,
    MSG_CACHE_NETWORK_ERROR,
    MSG_CACHE_OFFLINE,
    MSG_OFFLINE,
)
from whiteboard.domain.entities.pending_action import PendingAction
from whiteboard.domain.enums import ErrorCode, HttpMethod
from whiteboard.domain.exceptions import (
    NetworkException,
    StorageException,
    WhiteboardException,
)
from whiteboard.domain.value_objects.core import ApiResponse
from whiteboard.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


class RequestGateway:
    """Offline-aware access to the backend resource API.

    Args:
        transport: Network path to the backend.
        cache: Local cache store for reads.
        queue: Pending action queue for offline mutations.
        connectivity: Process-wide connectivity state (read only here).
        token_provider: Source of the bearer token.
    """

    def __init__(
        self,
        transport: ITransport,
        cache: LocalCacheStore,
        queue: PendingActionQueue,
        connectivity: ConnectivityMonitor,
        token_provider: ITokenProvider,
    ) -> None:
        self.transport = transport
        self.cache = cache
        self.queue = queue
        self.connectivity = connectivity
        self.token_provider = token_provider

    @traced("gateway.request")
    async def request(
        self,
        method: HttpMethod | str,
        path: str,
        body: Any = None,
        *,
        with_token: bool = True,
        cache_key: str | None = None,
        enable_cache: bool | None = None,
    ) -> ApiResponse:
        """Run one call against the backend, the cache or the queue.

        Args:
            method: get, post, patch, put or delete.
            path: Resource path relative to the server URL (e.g. courses/42).
            body: Optional JSON payload for mutations.
            with_token: Attach the bearer token when one is available.
            cache_key: Cache slot for this resource.
            enable_cache: Consult/populate the cache; defaults to True for
                reads and False for mutations.

        Returns:
            ApiResponse; failures carry error.code (OFFLINE, NETWORK_ERROR,
            backend codes passed through, UNKNOWN_ERROR).
        """
        try:
            http_method = HttpMethod(method.lower()) if isinstance(method, str) else method
        except ValueError:
            return ApiResponse.fail(ErrorCode.VALIDATION_ERROR, f"Unsupported method: {method}")
        if enable_cache is None:
            enable_cache = not http_method.is_mutation
        add_span_attributes(
            **{
                "http.method": http_method.value,
                "gateway.path": path,
                "gateway.online": self.connectivity.is_online,
            }
        )

        try:
            if http_method.is_mutation:
                return await self._mutate(http_method, path, body, with_token, cache_key, enable_cache)
            return await self._read(http_method, path, body, with_token, cache_key, enable_cache)
        except WhiteboardException as e:
            logger.warning("%s %s failed: %s", http_method.value.upper(), path, e.message)
            return ApiResponse.fail(e.error_code, e.message)
        except Exception as e:
            logger.exception("Unexpected error in %s %s", http_method.value.upper(), path)
            return ApiResponse.fail(
                ErrorCode.UNKNOWN_ERROR, str(e) or "An unexpected error occurred"
            )

    async def _read(
        self,
        method: HttpMethod,
        path: str,
        body: Any,
        with_token: bool,
        cache_key: str | None,
        enable_cache: bool,
    ) -> ApiResponse:
        use_cache = bool(enable_cache and cache_key)
        if not self.connectivity.is_online:
            if use_cache:
                cached = await self.cache.get(cache_key)
                if cached is not None:
                    return ApiResponse.ok(cached, message=MSG_CACHE_OFFLINE, from_cache=True)
            return ApiResponse.fail(ErrorCode.OFFLINE, MSG_OFFLINE)

        try:
            result = await self._send(method, path, body, with_token)
        except NetworkException as e:
            if use_cache:
                cached = await self.cache.get(cache_key)
                if cached is not None:
                    logger.info("Serving %s from cache after network error", cache_key)
                    return ApiResponse.ok(cached, message=MSG_CACHE_NETWORK_ERROR, from_cache=True)
            return ApiResponse.fail(ErrorCode.NETWORK_ERROR, e.message)

        if use_cache and result.success and result.data is not None:
            await self._store(cache_key, result.data)
        return result

    async def _mutate(
        self,
        method: HttpMethod,
        path: str,
        body: Any,
        with_token: bool,
        cache_key: str | None,
        enable_cache: bool,
    ) -> ApiResponse:
        if not self.connectivity.is_online:
            action = await self.queue.enqueue(
                method, path, body, requires_auth=with_token, cache_key=cache_key
            )
            return ApiResponse.ok(
                {"queued": True, "actionId": action.id, "code": ErrorCode.QUEUED.value},
                message=MSG_ACTION_QUEUED,
            )

        try:
            result = await self._send(method, path, body, with_token)
        except NetworkException as e:
            return ApiResponse.fail(ErrorCode.NETWORK_ERROR, e.message)

        if result.success and cache_key:
            if enable_cache and result.data is not None:
                await self._store(cache_key, result.data)
            else:
                await self.cache.invalidate(cache_key)
        return result

    async def replay(self, action: PendingAction) -> ApiResponse:
        """Send a queued action over the network.

        Never consults connectivity and never enqueues, so a failed replay
        cannot re-queue the action. On success the action's cache slot is
        invalidated.
        """
        try:
            result = await self._send(action.method, action.path, action.body, action.requires_auth)
        except NetworkException as e:
            return ApiResponse.fail(ErrorCode.NETWORK_ERROR, e.message)
        except WhiteboardException as e:
            return ApiResponse.fail(e.error_code, e.message)
        except Exception as e:
            logger.exception("Unexpected error replaying action %s", action.id)
            return ApiResponse.fail(
                ErrorCode.UNKNOWN_ERROR, str(e) or "An unexpected error occurred"
            )
        if result.success and action.cache_key:
            await self.cache.invalidate(action.cache_key)
        return result

    async def _send(
        self, method: HttpMethod, path: str, body: Any, with_token: bool
    ) -> ApiResponse:
        token = await self.token_provider.get_token() if with_token else None
        return await self.transport.send(method, path, body, token)

    async def _store(self, cache_key: str, data: Any) -> None:
        """Refresh a cache slot; a failed write never fails the call."""
        try:
            await self.cache.put(cache_key, data)
        except StorageException:
            logger.warning("Failed to save %s to cache", cache_key, exc_info=True)
