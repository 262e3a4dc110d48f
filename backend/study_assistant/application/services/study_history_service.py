"""Study history — incidental persistence of conversations, analyses,
flashcard sets and saved sessions in the key-value store."""

import logging
from collections.abc import Callable
from typing import Any

from study_assistant.application.interfaces import KeyValueStore
from study_assistant.application.schemas.history import HistoryType
from study_assistant.application.services.performance_metrics import epoch_ms

logger = logging.getLogger(__name__)

HISTORY_PREFIXES: dict[HistoryType, str] = {
    HistoryType.CONVERSATIONS: "conversation:",
    HistoryType.FLASHCARDS: "flashcards:",
    HistoryType.ANALYSES: "analysis:",
}
HISTORY_LIMIT = 50


def _timestamp_of(record: dict[str, Any]) -> int:
    try:
        return int(record.get("timestamp") or 0)
    except (TypeError, ValueError):
        return 0


class StudyHistoryService:
    """Stores and lists study records."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = epoch_ms):
        self._store = store
        self._clock = clock

    def now_ms(self) -> int:
        return self._clock()

    async def store_record(self, key: str, value: dict[str, Any]) -> str | None:
        """Persist a record, best-effort.

        Returns:
            The key on success, None if the store rejected the write.
        """
        try:
            await self._store.set(key, value)
        except Exception:
            logger.exception("Failed to store study record '%s'", key)
            return None
        return key

    async def get_history(self, history_type: HistoryType) -> list[dict[str, Any]]:
        """Return the newest HISTORY_LIMIT records of one type.

        Raises:
            KeyValueStoreError: If the store cannot be read.
        """
        records = await self._store.get_by_prefix(HISTORY_PREFIXES[history_type])
        records.sort(key=_timestamp_of, reverse=True)
        return records[:HISTORY_LIMIT]

    async def save_session(self, session_data: dict[str, Any]) -> str:
        """Store a study session snapshot and return its id.

        Raises:
            KeyValueStoreError: If the store cannot be written.
        """
        timestamp = self.now_ms()
        session_id = f"session:{timestamp}"
        await self._store.set(session_id, {**session_data, "timestamp": timestamp})
        logger.info("Saved study session %s", session_id)
        return session_id
