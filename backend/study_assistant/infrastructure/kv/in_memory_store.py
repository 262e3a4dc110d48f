"""In-process key-value store for local development and tests."""

import asyncio
import copy
from typing import Any

from study_assistant.application.interfaces import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed KeyValueStore; contents are lost on restart."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def set(self, key: str, value: dict[str, Any]) -> None:
        async with self._lock:
            self._data[key] = copy.deepcopy(value)

    async def get(self, key: str) -> dict[str, Any] | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(self._data[key])
            for key in sorted(self._data)
            if key.startswith(prefix)
        ]
