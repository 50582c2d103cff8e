"""Cache API: invalidate one slot or clear everything (sign-out)."""

from fastapi import APIRouter, Depends, HTTPException

from whiteboard.api.v1.dependencies import get_cache_store
from whiteboard.application.services import LocalCacheStore
from whiteboard.schemas.sync import ClearedResponse

router = APIRouter()


@router.delete("/{key}", status_code=204)
async def invalidate_cache_key(
    key: str,
    cache: LocalCacheStore = Depends(get_cache_store),
) -> None:
    """Remove one cache slot; 404 if nothing was cached under key."""
    if not await cache.invalidate(key):
        raise HTTPException(status_code=404, detail=f"No cache entry for '{key}'")


@router.delete("", response_model=ClearedResponse)
async def clear_cache(
    cache: LocalCacheStore = Depends(get_cache_store),
) -> ClearedResponse:
    return ClearedResponse(removed=await cache.clear())
