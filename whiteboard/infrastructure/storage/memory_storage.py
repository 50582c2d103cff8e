"""In-process key-value storage (lost on restart)."""

from __future__ import annotations

import json
from typing import Any

from whiteboard.domain.exceptions import StorageException


class MemoryStorage:
    """Dict-backed storage implementing IKeyValueStorage.

    Values are copied through JSON on the way in and out, so stored state
    is never aliased by callers and non-serializable values fail the same
    way they would on a durable backend.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def connect(self) -> None:
        """Nothing to connect; present so backends are interchangeable."""

    async def disconnect(self) -> None:
        self._data.clear()

    async def get(self, key: str) -> Any:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageException("set", key, str(e)) from e

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]
