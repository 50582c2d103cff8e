"""Settings validation and bearer token providers."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from whiteboard.core.config import Settings
from whiteboard.core.constants import ACCESS_TOKEN_KEY
from whiteboard.domain.exceptions import StorageException
from whiteboard.infrastructure.security import StaticTokenProvider, StorageTokenProvider
from whiteboard.infrastructure.storage import MemoryStorage


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.storage_backend == "sql"
    assert settings.replay_policy == "strict"
    assert settings.replay_max_attempts == 5
    assert settings.cache_ttl_ms == 24 * 60 * 60 * 1000


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("REPLAY_POLICY", "best_effort")
    settings = Settings(_env_file=None)
    assert settings.cache_ttl_ms == 60_000
    assert settings.replay_policy == "best_effort"


@pytest.mark.parametrize(
    "overrides",
    [
        {"storage_backend": "filesystem"},
        {"storage_backend": "sql", "database_url": ""},
        {"replay_policy": "random"},
        {"replay_max_attempts": 0},
        {"cache_ttl_seconds": 0},
    ],
)
def test_invalid_settings(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


async def test_static_token_provider() -> None:
    assert await StaticTokenProvider("abc").get_token() == "abc"
    assert await StaticTokenProvider("").get_token() is None


async def test_storage_token_provider_round_trip() -> None:
    storage = MemoryStorage()
    provider = StorageTokenProvider(storage, fallback="from-settings")
    assert await provider.get_token() == "from-settings"
    await provider.set_token("signed-in")
    assert await storage.get(ACCESS_TOKEN_KEY) == "signed-in"
    assert await provider.get_token() == "signed-in"
    await provider.set_token(None)
    assert await provider.get_token() == "from-settings"


async def test_storage_token_provider_read_failure_uses_fallback() -> None:
    storage = AsyncMock()
    storage.get = AsyncMock(side_effect=StorageException("get", ACCESS_TOKEN_KEY, "down"))
    assert await StorageTokenProvider(storage).get_token() is None
