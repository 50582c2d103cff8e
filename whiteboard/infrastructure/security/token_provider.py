"""Bearer token sources for the request gateway."""

from __future__ import annotations

import logging

from whiteboard.application.interfaces.storage import IKeyValueStorage
from whiteboard.core.constants import ACCESS_TOKEN_KEY
from whiteboard.domain.exceptions import StorageException

logger = logging.getLogger(__name__)


class StaticTokenProvider:
    """Token fixed at construction (e.g. ACCESS_TOKEN from settings)."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    async def get_token(self) -> str | None:
        return self._token


class StorageTokenProvider:
    """Token kept in the key-value storage under accessToken.

    The sign-in flow stores the token with set_token(); sign-out clears it.
    Falls back to a static token when nothing is stored.
    """

    def __init__(self, storage: IKeyValueStorage, fallback: str | None = None) -> None:
        self.storage = storage
        self.fallback = fallback or None

    async def get_token(self) -> str | None:
        """Return the stored token, the fallback, or None.

        A storage failure is logged and treated as "no token"; the server
        then rejects calls that need one.
        """
        try:
            token = await self.storage.get(ACCESS_TOKEN_KEY)
        except StorageException:
            logger.warning("Failed to read access token from storage", exc_info=True)
            token = None
        if isinstance(token, str) and token:
            return token
        return self.fallback

    async def set_token(self, token: str | None) -> None:
        """Store a new token, or clear it with None."""
        if token:
            await self.storage.set(ACCESS_TOKEN_KEY, token)
        else:
            await self.storage.delete(ACCESS_TOKEN_KEY)
