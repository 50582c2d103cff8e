"""Liveness endpoint for the sync agent process."""

from fastapi import APIRouter

from whiteboard.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse()
