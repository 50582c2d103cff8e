"""PendingActionQueue: FIFO persistence, snapshots, bookkeeping, failed list."""

import asyncio

import pytest

from tests.fakes import FakeClock
from whiteboard.application.services import PendingActionQueue
from whiteboard.core.constants import (
    FAILED_ACTIONS_KEY,
    PENDING_ACTIONS_KEY,
    PENDING_ATTEMPTS_KEY,
)
from whiteboard.domain.enums import FailureReason, HttpMethod
from whiteboard.domain.exceptions import ValidationException
from whiteboard.infrastructure.storage import MemoryStorage


async def test_enqueue_persists_action(
    action_queue: PendingActionQueue, storage: MemoryStorage, clock: FakeClock
) -> None:
    action = await action_queue.enqueue("post", "courses", {"title": "A"}, cache_key="courses")
    assert action.id.startswith(f"action_{clock.now}_")
    assert action.method is HttpMethod.POST
    raw = await storage.get(PENDING_ACTIONS_KEY)
    assert raw == [
        {
            "id": action.id,
            "method": "post",
            "path": "courses",
            "body": {"title": "A"},
            "requiresAuth": True,
            "enqueuedAt": clock.now,
            "cacheKey": "courses",
        }
    ]


async def test_fifo_order(action_queue: PendingActionQueue, clock: FakeClock) -> None:
    ids = []
    for i in range(3):
        ids.append((await action_queue.enqueue("post", f"items/{i}")).id)
        clock.advance(1)
    assert [a.id for a in await action_queue.list_pending()] == ids
    assert await action_queue.size() == 3


async def test_ids_unique_within_same_millisecond(action_queue: PendingActionQueue) -> None:
    a = await action_queue.enqueue("post", "messages")
    b = await action_queue.enqueue("post", "messages")
    assert a.id != b.id


async def test_get_cannot_be_queued(action_queue: PendingActionQueue) -> None:
    with pytest.raises(ValidationException):
        await action_queue.enqueue("get", "courses")


async def test_unknown_method_rejected(action_queue: PendingActionQueue) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await action_queue.enqueue("head", "courses")
    assert exc_info.value.details == {"field": "method"}


async def test_snapshot_does_not_see_later_enqueues(action_queue: PendingActionQueue) -> None:
    await action_queue.enqueue("post", "a")
    snapshot = await action_queue.list_pending()
    await action_queue.enqueue("post", "b")
    assert len(snapshot) == 1
    assert await action_queue.size() == 2


async def test_remove(action_queue: PendingActionQueue) -> None:
    a = await action_queue.enqueue("post", "a")
    b = await action_queue.enqueue("delete", "b")
    assert await action_queue.remove(a.id) is True
    assert await action_queue.remove(a.id) is False
    assert [x.id for x in await action_queue.list_pending()] == [b.id]


async def test_concurrent_enqueues_are_not_lost(action_queue: PendingActionQueue) -> None:
    await asyncio.gather(*(action_queue.enqueue("post", f"n/{i}") for i in range(20)))
    assert await action_queue.size() == 20


async def test_malformed_entries_are_skipped(
    action_queue: PendingActionQueue, storage: MemoryStorage
) -> None:
    good = await action_queue.enqueue("post", "a")
    raw = await storage.get(PENDING_ACTIONS_KEY)
    raw.insert(0, {"id": "broken"})
    await storage.set(PENDING_ACTIONS_KEY, raw)
    assert [a.id for a in await action_queue.list_pending()] == [good.id]


async def test_record_failure_schedules_next_attempt(
    action_queue: PendingActionQueue, clock: FakeClock
) -> None:
    action = await action_queue.enqueue("post", "a")
    first = await action_queue.record_failure(action.id, "timeout", 1_000)
    assert first.attempts == 1
    assert first.next_attempt_at == clock.now + 1_000
    assert not first.is_due(clock.now)
    second = await action_queue.record_failure(action.id, "refused", 2_000)
    assert second.attempts == 2
    assert (await action_queue.get_attempt(action.id)).last_error == "refused"


async def test_remove_drops_attempts(
    action_queue: PendingActionQueue, storage: MemoryStorage
) -> None:
    action = await action_queue.enqueue("post", "a")
    await action_queue.record_failure(action.id, "x", 0)
    await action_queue.remove(action.id)
    assert await storage.get(PENDING_ATTEMPTS_KEY) == {}
    assert (await action_queue.get_attempt(action.id)).attempts == 0


async def test_move_to_failed(
    action_queue: PendingActionQueue, storage: MemoryStorage, clock: FakeClock
) -> None:
    action = await action_queue.enqueue("patch", "courses/9", {"x": 1})
    failed = await action_queue.move_to_failed(
        action, FailureReason.ORPHANED, "NOT_FOUND", "Course not found", 1
    )
    assert failed.failed_at == clock.now
    assert await action_queue.size() == 0
    listed = await action_queue.list_failed()
    assert listed == [failed]
    assert (await storage.get(FAILED_ACTIONS_KEY))[0]["reason"] == "orphaned"


async def test_clear_failed(action_queue: PendingActionQueue) -> None:
    action = await action_queue.enqueue("post", "a")
    await action_queue.move_to_failed(action, FailureReason.REJECTED, "FORBIDDEN", "no", 1)
    assert await action_queue.clear_failed() == 1
    assert await action_queue.list_failed() == []
