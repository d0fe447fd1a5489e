"""
String key-value storage (the browser localStorage contract: get / set / remove).
MemoryStorage lives in the process; SqlStorage keeps one row per key via SQLAlchemy.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from mapty.config import settings
from mapty.models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqlStorage:
    """Each call runs in its own transaction, so a set() is never half-written."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        with self._session_factory() as session:
            r = session.execute(select(StorageEntry.value).where(StorageEntry.key == key))
            return r.scalar_one_or_none()

    def set(self, key: str, value: str) -> None:
        with self._session_factory.begin() as session:
            session.merge(StorageEntry(key=key, value=value))

    def remove(self, key: str) -> None:
        with self._session_factory.begin() as session:
            session.execute(delete(StorageEntry).where(StorageEntry.key == key))


def get_storage() -> KeyValueStorage:
    """Storage backend selected by STORAGE_BACKEND."""
    settings.validate_storage_config()
    if settings.storage_backend == "memory":
        logger.warning("Storage: using in-memory backend, workouts are lost on restart")
        return MemoryStorage()
    from mapty.db.session import init_db, session_maker

    init_db()
    return SqlStorage(session_maker)
