"""Replay service: drains the pending action queue when connectivity returns.

One pass walks a snapshot of the queue in FIFO order and sends each due
action through the gateway's network path. Successes are removed, definite
rejections (gone or refused by the backend) move to the failed list, and
retryable failures are counted with exponential backoff. Under the strict
policy the first retryable failure halts the pass so later actions never
overtake an earlier one.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from whiteboard.application.services.action_queue import PendingActionQueue
from whiteboard.application.services.connectivity import ConnectivityMonitor
from whiteboard.application.services.request_gateway import RequestGateway
from whiteboard.domain.entities.pending_action import PendingAction
from whiteboard.domain.enums import (
    ErrorCode,
    FailureReason,
    QueueState,
    ReplayPolicy,
    SyncEvent,
)
from whiteboard.domain.exceptions import StorageException
from whiteboard.domain.value_objects.core import ApiResponse
from whiteboard.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)
from whiteboard.shared.utils.datetime import now_ms

logger = logging.getLogger(__name__)

EventHandler = Callable[[dict[str, Any]], Awaitable[None]]

_GONE_STATUSES = frozenset({404, 410})
# 4xx answers that may succeed later (expired token, timeout, rate limit).
_RETRYABLE_4XX = frozenset({401, 408, 429})


@dataclass
class ReplayReport:
    """Outcome of replay_all (one or more passes)."""

    replayed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    retained: int = 0
    coalesced: bool = False
    halted: bool = False
    offline: bool = False

    def merge(self, other: ReplayReport) -> None:
        """Fold a follow-up pass into this report."""
        self.replayed.extend(other.replayed)
        self.failed.extend(other.failed)
        self.retained = other.retained
        self.halted = other.halted
        self.offline = other.offline

    def to_dict(self) -> dict[str, Any]:
        return {
            "replayed": list(self.replayed),
            "failed": list(self.failed),
            "retained": self.retained,
            "coalesced": self.coalesced,
            "halted": self.halted,
            "offline": self.offline,
        }


def classify_failure(result: ApiResponse) -> FailureReason | None:
    """Decide whether a failed replay is permanent.

    Returns:
        ORPHANED when the target resource is gone, REJECTED when the backend
        answered and refused the action, None when the failure is retryable
        (no answer, 401/408/429 or 5xx).
    """
    status = result.error.status if result.error else None
    if status in _GONE_STATUSES or (
        status is not None and result.error_code == ErrorCode.NOT_FOUND.value
    ):
        return FailureReason.ORPHANED
    if status is None or status in _RETRYABLE_4XX or status >= 500:
        return None
    return FailureReason.REJECTED


class ReplayService:
    """Replays queued actions and reports the results to subscribers.

    Args:
        gateway: Request gateway; only its replay() path is used.
        queue: Pending action queue.
        connectivity: Connectivity monitor; replay_all runs on offline -> online.
        policy: STRICT halts on the first retryable failure, BEST_EFFORT continues.
        max_attempts: Retryable failures before an action is moved to the failed list.
        backoff_base_ms: Delay after the first failure.
        backoff_max_ms: Upper bound of the delay.
        clock: Returns the current time in epoch ms.
    """

    def __init__(
        self,
        gateway: RequestGateway,
        queue: PendingActionQueue,
        connectivity: ConnectivityMonitor,
        policy: ReplayPolicy = ReplayPolicy.STRICT,
        max_attempts: int = 5,
        backoff_base_ms: int = 2_000,
        backoff_max_ms: int = 300_000,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.gateway = gateway
        self.queue = queue
        self.connectivity = connectivity
        self.policy = policy
        self.max_attempts = max_attempts
        self.backoff_base_ms = backoff_base_ms
        self.backoff_max_ms = backoff_max_ms
        self.clock = clock
        self._handlers: dict[SyncEvent, list[EventHandler]] = defaultdict(list)
        self._replaying = False
        self._rerun_requested = False
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self) -> None:
        """Subscribe to connectivity so reconnection triggers a replay."""
        if self._unsubscribe is None:
            self._unsubscribe = self.connectivity.subscribe(self._on_connectivity)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_connectivity(self, online: bool) -> None:
        if online:
            report = await self.replay_all()
            logger.info("Replay after reconnection: %s", report.to_dict())

    def on(self, event: SyncEvent, handler: EventHandler) -> Callable[[], None]:
        """Register an async handler for a reconciliation event.

        Returns:
            Callable that removes the handler.
        """
        self._handlers[event].append(handler)

        def off() -> None:
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return off

    async def _emit(self, event: SyncEvent, payload: dict[str, Any]) -> None:
        for handler in list(self._handlers[event]):
            try:
                await handler(payload)
            except Exception:
                logger.exception("Handler for %s failed", event.value)

    @property
    def is_replaying(self) -> bool:
        return self._replaying

    async def get_state(self) -> QueueState:
        if self._replaying:
            return QueueState.REPLAYING
        if await self.queue.size():
            return QueueState.IDLE_WITH_BACKLOG
        return QueueState.IDLE

    def backoff_ms(self, attempts: int) -> int:
        """Delay before the next attempt after `attempts` failures."""
        delay = self.backoff_base_ms * 2 ** max(attempts - 1, 0)
        return int(min(delay, self.backoff_max_ms))

    @traced("replay.replay_all")
    async def replay_all(self) -> ReplayReport:
        """Drain the queue in FIFO order.

        Only one pass runs at a time. A call made while a pass is running
        returns a coalesced report immediately and schedules one follow-up
        pass, which runs once the current pass finishes without halting.

        Returns:
            ReplayReport with replayed and failed action ids and the number
            of actions still queued.
        """
        if self._replaying:
            self._rerun_requested = True
            logger.debug("Replay already running; trigger coalesced")
            return ReplayReport(coalesced=True, retained=await self.queue.size())
        if not self.connectivity.is_online:
            return ReplayReport(offline=True, retained=await self.queue.size())

        self._replaying = True
        report = ReplayReport()
        try:
            while True:
                self._rerun_requested = False
                report.merge(await self._run_pass())
                if report.halted or not self._rerun_requested:
                    break
                logger.debug("Running follow-up replay pass")
        finally:
            self._replaying = False
            self._rerun_requested = False

        add_span_attributes(
            **{
                "replay.replayed": len(report.replayed),
                "replay.failed": len(report.failed),
                "replay.retained": report.retained,
            }
        )
        if report.retained == 0 and (report.replayed or report.failed):
            await self._emit(
                SyncEvent.QUEUE_DRAINED,
                {"replayed": len(report.replayed), "failed": len(report.failed)},
            )
        return report

    async def _run_pass(self) -> ReplayReport:
        report = ReplayReport()
        pending: list[PendingAction] = []
        try:
            pending = await self.queue.list_pending()
            await self._drain(pending, report)
        except StorageException:
            logger.exception("Queue storage failed; replay halted with actions still queued")
            report.halted = True

        try:
            report.retained = await self.queue.size()
        except StorageException:
            logger.warning("Could not count queued actions after replay", exc_info=True)
            report.retained = len(pending) - len(report.replayed) - len(report.failed)
        return report

    async def _drain(self, pending: list[PendingAction], report: ReplayReport) -> None:
        strict = self.policy == ReplayPolicy.STRICT
        for action in pending:
            if not self.connectivity.is_online:
                logger.info("Connectivity lost during replay; stopping")
                report.halted = True
                report.offline = True
                break

            attempt = await self.queue.get_attempt(action.id)
            if not attempt.is_due(self.clock()):
                if strict:
                    report.halted = True
                    break
                continue

            result = await self.gateway.replay(action)
            if result.success:
                await self.queue.remove(action.id)
                report.replayed.append(action.id)
                logger.info("Replayed offline action %s", action.id)
                await self._emit(
                    SyncEvent.ACTION_REPLAYED,
                    {"action": action.to_dict(), "data": result.data},
                )
                continue

            reason = classify_failure(result)
            if reason is not None:
                await self._fail(action, reason, result, attempt.attempts + 1)
                report.failed.append(action.id)
                continue

            message = result.error.message if result.error else None
            attempt = await self.queue.record_failure(
                action.id, message, self.backoff_ms(attempt.attempts + 1)
            )
            if attempt.attempts >= self.max_attempts:
                await self._fail(action, FailureReason.MAX_ATTEMPTS, result, attempt.attempts)
                report.failed.append(action.id)
                continue

            logger.warning(
                "Replay of %s failed (attempt %s/%s): %s",
                action.id,
                attempt.attempts,
                self.max_attempts,
                message,
            )
            if strict:
                report.halted = True
                break

    async def _fail(
        self,
        action: PendingAction,
        reason: FailureReason,
        result: ApiResponse,
        attempts: int,
    ) -> None:
        failed = await self.queue.move_to_failed(
            action,
            reason,
            result.error_code,
            result.error.message if result.error else None,
            attempts,
        )
        add_span_event(
            "replay.action_failed", {"action.id": action.id, "reason": reason.value}
        )
        await self._emit(SyncEvent.ACTION_FAILED, failed.to_dict())
