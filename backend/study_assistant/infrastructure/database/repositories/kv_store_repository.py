"""Concrete key-value store backed by SQLAlchemy.

Each write runs in its own short-lived session and commits immediately,
so a metric recorded during a request survives even if the request
itself fails afterwards.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from study_assistant.application.interfaces import KeyValueStore
from study_assistant.domain.exceptions import KeyValueStoreError
from study_assistant.infrastructure.database.models.kv_entry import KeyValueEntryModel

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

# Driver connect failures (asyncpg ConnectionRefusedError, DNS errors) surface as OSError
_STORE_ERRORS = (SQLAlchemyError, OSError)


class SQLAlchemyKeyValueStore(KeyValueStore):
    """Implements the KeyValueStore port on the 'kv_store' table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def set(self, key: str, value: dict[str, Any]) -> None:
        try:
            async with self._session_factory() as session:
                await self._upsert(session, key, value)
                await session.commit()
        except _STORE_ERRORS as exc:
            raise KeyValueStoreError("set", str(exc) or exc.__class__.__name__) from exc

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                model = await session.get(KeyValueEntryModel, key)
                return dict(model.value) if model is not None else None
        except _STORE_ERRORS as exc:
            raise KeyValueStoreError("get", str(exc) or exc.__class__.__name__) from exc

    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        stmt = (
            select(KeyValueEntryModel.value)
            .where(KeyValueEntryModel.key.startswith(prefix, autoescape=True))
            .order_by(KeyValueEntryModel.key)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [dict(value) for value in result.scalars().all()]
        except _STORE_ERRORS as exc:
            raise KeyValueStoreError("get_by_prefix", str(exc) or exc.__class__.__name__) from exc

    @staticmethod
    async def _upsert(session: AsyncSession, key: str, value: dict[str, Any]) -> None:
        """Insert or overwrite a key using the dialect's native upsert."""
        now = datetime.now(timezone.utc)
        insert = _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
        if insert is None:
            await session.merge(KeyValueEntryModel(key=key, value=value, updated_at=now))
            return

        stmt = insert(KeyValueEntryModel).values(key=key, value=value, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[KeyValueEntryModel.key],
            set_={"value": stmt.excluded["value"], "updated_at": stmt.excluded["updated_at"]},
        )
        await session.execute(stmt)
