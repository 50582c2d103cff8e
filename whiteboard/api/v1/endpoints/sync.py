"""Sync API: connectivity notifications, queue inspection and replay."""

from fastapi import APIRouter, Depends

from whiteboard.api.v1.dependencies import (
    get_action_queue,
    get_connectivity,
    get_replay_service,
)
from whiteboard.application.services import (
    ConnectivityMonitor,
    PendingActionQueue,
    ReplayService,
)
from whiteboard.domain.exceptions import ActionNotFoundException
from whiteboard.schemas.sync import (
    ClearedResponse,
    ConnectivityResponse,
    ConnectivityUpdate,
    FailedActionResponse,
    PendingActionResponse,
    ReplayReportResponse,
    SyncStatusResponse,
)

router = APIRouter()


@router.get("/status", response_model=SyncStatusResponse)
async def get_sync_status(
    connectivity: ConnectivityMonitor = Depends(get_connectivity),
    queue: PendingActionQueue = Depends(get_action_queue),
    replay: ReplayService = Depends(get_replay_service),
) -> SyncStatusResponse:
    """Connectivity, queue state and pending/failed counts."""
    state = await replay.get_state()
    return SyncStatusResponse(
        online=connectivity.is_online,
        state=state.value,
        pending=await queue.size(),
        failed=len(await queue.list_failed()),
        policy=replay.policy.value,
    )


@router.get("/pending", response_model=list[PendingActionResponse])
async def list_pending_actions(
    queue: PendingActionQueue = Depends(get_action_queue),
) -> list[PendingActionResponse]:
    """Queued mutations in replay (FIFO) order."""
    items = []
    for action in await queue.list_pending():
        attempt = await queue.get_attempt(action.id)
        items.append(
            PendingActionResponse.from_action(
                action,
                attempts=attempt.attempts,
                last_error=attempt.last_error,
                next_attempt_at=attempt.next_attempt_at,
            )
        )
    return items


@router.get("/failed", response_model=list[FailedActionResponse])
async def list_failed_actions(
    queue: PendingActionQueue = Depends(get_action_queue),
) -> list[FailedActionResponse]:
    return [FailedActionResponse.from_failed(f) for f in await queue.list_failed()]


@router.delete("/failed", response_model=ClearedResponse)
async def clear_failed_actions(
    queue: PendingActionQueue = Depends(get_action_queue),
) -> ClearedResponse:
    """Forget permanently failed actions once the caller has reconciled them."""
    return ClearedResponse(removed=await queue.clear_failed())


@router.post("/replay", response_model=ReplayReportResponse)
async def replay_pending_actions(
    replay: ReplayService = Depends(get_replay_service),
) -> ReplayReportResponse:
    """Manual replay trigger. Returns coalesced=true if a pass is already running."""
    report = await replay.replay_all()
    return ReplayReportResponse(**report.to_dict())


@router.put("/connectivity", response_model=ConnectivityResponse)
async def update_connectivity(
    body: ConnectivityUpdate,
    connectivity: ConnectivityMonitor = Depends(get_connectivity),
) -> ConnectivityResponse:
    """Platform network-change notification; offline -> online triggers a replay."""
    changed = await connectivity.set_online(body.online)
    return ConnectivityResponse(online=connectivity.is_online, changed=changed)


@router.delete("/pending/{action_id}", status_code=204)
async def discard_pending_action(
    action_id: str,
    queue: PendingActionQueue = Depends(get_action_queue),
) -> None:
    """Drop a queued mutation without sending it."""
    if not await queue.remove(action_id):
        raise ActionNotFoundException(action_id)
