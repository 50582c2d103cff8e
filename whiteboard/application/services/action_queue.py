"""Pending action queue: durable FIFO log of mutations deferred while offline.

The queue is one ordered JSON list in key-value storage. Every
read-modify-write of that list runs under one asyncio.Lock so concurrent
enqueue and remove calls never lose updates. Retry bookkeeping and
permanently failed actions are stored beside the list, never inside the
(immutable) actions.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from whiteboard.application.interfaces.storage import IKeyValueStorage
from whiteboard.core.constants import (
    FAILED_ACTIONS_KEY,
    PENDING_ACTIONS_KEY,
    PENDING_ATTEMPTS_KEY,
)
from whiteboard.domain.entities.pending_action import (
    FailedAction,
    PendingAction,
    ReplayAttempt,
)
from whiteboard.domain.enums import FailureReason, HttpMethod
from whiteboard.domain.exceptions import ValidationException
from whiteboard.shared.utils.datetime import now_ms
from whiteboard.shared.utils.generators import generate_action_id

logger = logging.getLogger(__name__)


class PendingActionQueue:
    """FIFO queue of PendingAction persisted in key-value storage.

    Args:
        storage: Key-value storage shared with the cache store.
        clock: Returns the current time in epoch ms (injectable for tests).
        id_factory: Builds an action id from the enqueue timestamp.
    """

    def __init__(
        self,
        storage: IKeyValueStorage,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[int], str] = generate_action_id,
    ) -> None:
        self.storage = storage
        self.clock = clock
        self.id_factory = id_factory
        self._lock = asyncio.Lock()

    async def _load_raw(self, key: str) -> list[dict[str, Any]]:
        raw = await self.storage.get(key)
        if not isinstance(raw, list):
            return []
        return [item for item in raw if isinstance(item, dict)]

    async def _load_attempts(self) -> dict[str, dict[str, Any]]:
        raw = await self.storage.get(PENDING_ATTEMPTS_KEY)
        return raw if isinstance(raw, dict) else {}

    async def enqueue(
        self,
        method: HttpMethod | str,
        path: str,
        body: Any = None,
        requires_auth: bool = True,
        cache_key: str | None = None,
        action_id: str | None = None,
    ) -> PendingAction:
        """Append a mutation to the end of the queue.

        Args:
            method: post, patch, put or delete.
            path: Resource path the action targets.
            body: Optional JSON-serializable payload.
            requires_auth: Replay with a bearer token.
            cache_key: Cache slot to invalidate after a successful replay.
            action_id: Caller-supplied id; generated when omitted.

        Returns:
            The enqueued action (its id is what callers keep).

        Raises:
            ValidationException: If the method is not a mutation or the path is empty.
            StorageException: If the queue could not be persisted.
        """
        try:
            http_method = HttpMethod(method.lower()) if isinstance(method, str) else method
        except ValueError as e:
            raise ValidationException(f"Unsupported method: {method}", field="method") from e
        enqueued_at = self.clock()
        action = PendingAction(
            id=action_id or self.id_factory(enqueued_at),
            method=http_method,
            path=path,
            body=body,
            requires_auth=requires_auth,
            enqueued_at=enqueued_at,
            cache_key=cache_key,
        )
        async with self._lock:
            items = await self._load_raw(PENDING_ACTIONS_KEY)
            items.append(action.to_dict())
            await self.storage.set(PENDING_ACTIONS_KEY, items)
        logger.info(
            "Queued offline action %s: %s %s", action.id, action.method.value.upper(), action.path
        )
        return action

    async def list_pending(self) -> list[PendingAction]:
        """Return a snapshot of queued actions in FIFO order.

        The returned list is independent of the store: actions enqueued
        while a caller iterates it are not observed.
        """
        actions: list[PendingAction] = []
        for item in await self._load_raw(PENDING_ACTIONS_KEY):
            try:
                actions.append(PendingAction.from_dict(item))
            except ValidationException:
                logger.error("Skipping malformed queued action: %r", item)
        return actions

    async def size(self) -> int:
        return len(await self._load_raw(PENDING_ACTIONS_KEY))

    async def remove(self, action_id: str) -> bool:
        """Delete an action (and its retry bookkeeping) by id.

        Returns:
            True if the action was queued.
        """
        async with self._lock:
            removed = await self._remove_locked(action_id)
        if removed:
            logger.debug("Removed queued action %s", action_id)
        return removed

    async def _remove_locked(self, action_id: str) -> bool:
        items = await self._load_raw(PENDING_ACTIONS_KEY)
        kept = [item for item in items if item.get("id") != action_id]
        if len(kept) == len(items):
            return False
        await self.storage.set(PENDING_ACTIONS_KEY, kept)
        attempts = await self._load_attempts()
        if attempts.pop(action_id, None) is not None:
            await self.storage.set(PENDING_ATTEMPTS_KEY, attempts)
        return True

    async def get_attempt(self, action_id: str) -> ReplayAttempt:
        """Return retry bookkeeping for an action (zero attempts if none)."""
        record = (await self._load_attempts()).get(action_id)
        return ReplayAttempt.from_dict(record) if record else ReplayAttempt()

    async def record_failure(
        self, action_id: str, error: str | None, backoff_ms: int
    ) -> ReplayAttempt:
        """Count one failed replay and schedule the next allowed attempt.

        Args:
            action_id: Queued action id.
            error: Error message of the failed attempt.
            backoff_ms: Delay before the action is due again.

        Returns:
            Updated bookkeeping.
        """
        async with self._lock:
            attempts = await self._load_attempts()
            previous = ReplayAttempt.from_dict(attempts.get(action_id) or {})
            updated = ReplayAttempt(
                attempts=previous.attempts + 1,
                last_error=error,
                next_attempt_at=self.clock() + max(backoff_ms, 0),
            )
            attempts[action_id] = updated.to_dict()
            await self.storage.set(PENDING_ATTEMPTS_KEY, attempts)
        return updated

    async def move_to_failed(
        self,
        action: PendingAction,
        reason: FailureReason,
        error_code: str | None,
        error_message: str | None,
        attempts: int,
    ) -> FailedAction:
        """Take an action out of the queue and keep it in the failed list."""
        failed = FailedAction(
            action=action,
            reason=reason,
            error_code=error_code,
            error_message=error_message,
            attempts=attempts,
            failed_at=self.clock(),
        )
        async with self._lock:
            await self._remove_locked(action.id)
            items = await self._load_raw(FAILED_ACTIONS_KEY)
            items.append(failed.to_dict())
            await self.storage.set(FAILED_ACTIONS_KEY, items)
        logger.warning(
            "Offline action %s failed permanently (%s): %s",
            action.id,
            reason.value,
            error_message,
        )
        return failed

    async def list_failed(self) -> list[FailedAction]:
        failed: list[FailedAction] = []
        for item in await self._load_raw(FAILED_ACTIONS_KEY):
            try:
                failed.append(FailedAction.from_dict(item))
            except (KeyError, ValueError, ValidationException):
                logger.error("Skipping malformed failed action: %r", item)
        return failed

    async def clear_failed(self) -> int:
        """Forget all permanently failed actions. Returns the count removed."""
        async with self._lock:
            count = len(await self._load_raw(FAILED_ACTIONS_KEY))
            await self.storage.delete(FAILED_ACTIONS_KEY)
        return count
