"""Liveness schema."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """GET /health body. Says nothing about backend reachability; see /sync/status."""

    status: Literal["ok"] = "ok"
