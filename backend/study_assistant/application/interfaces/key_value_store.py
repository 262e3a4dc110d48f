"""Abstract key-value store interface — port for the interaction log backend."""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Port — defines the persistence operations the application needs.

    Values are JSON-compatible dicts. Implementations must return
    ``get_by_prefix`` results in a deterministic order (by key) so that
    repeated reads of the same data agree.
    """

    @abstractmethod
    async def set(self, key: str, value: dict[str, Any]) -> None:
        """Store ``value`` under ``key``, replacing any existing value.

        Raises:
            KeyValueStoreError: If the store cannot be written.
        """
        ...

    @abstractmethod
    async def get(self, key: str) -> dict[str, Any] | None:
        """Return the value stored under ``key``, or None."""
        ...

    @abstractmethod
    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        """Return all values whose key starts with ``prefix``, in key order.

        Raises:
            KeyValueStoreError: If the store cannot be read.
        """
        ...
