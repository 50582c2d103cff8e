"""Security: bearer token providers."""

from whiteboard.infrastructure.security.token_provider import (
    StaticTokenProvider,
    StorageTokenProvider,
)

__all__ = ["StaticTokenProvider", "StorageTokenProvider"]
