"""API v1: sync agent routes."""

from whiteboard.api.v1.router import api_router

__all__ = ["api_router"]
