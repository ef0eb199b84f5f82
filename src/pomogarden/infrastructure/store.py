"""Best-effort key-value persistence for JSON documents.

``load(key)`` returns the decoded value or None; ``save(key, value)``
returns whether the write landed. Neither ever raises: read failures and
undecodable documents load as absent, write failures are logged and the
caller keeps its in-memory state.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from pomogarden.infrastructure.database.schema import kv_store

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
LANGUAGE_KEY = "language"
GARDEN_KEY = "garden"

_READ_ERRORS = (SQLAlchemyError, OSError)
_WRITE_ERRORS = (SQLAlchemyError, OSError, TypeError, ValueError)


class KeyValueStore:
    """Base store. Subclasses implement raw string ``_read``/``_write``."""

    def load(self, key: str) -> Any | None:
        """Return the decoded document under *key*, or None."""
        try:
            raw = self._read(key)
        except _READ_ERRORS:
            logger.warning("Could not read %r from store", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored value for %r is not valid JSON; ignoring it", key)
            return None

    def save(self, key: str, value: Any) -> bool:
        """Encode and store *value* under *key*. Returns False on failure."""
        try:
            raw = json.dumps(value, ensure_ascii=False)
            self._write(key, raw)
        except _WRITE_ERRORS:
            logger.warning("Could not save %r to store", key, exc_info=True)
            return False
        return True

    def close(self) -> None:
        """Release any underlying resources."""

    def _read(self, key: str) -> str | None:
        raise NotImplementedError

    def _write(self, key: str, raw: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Process-local store (``--ephemeral`` runs and tests)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.raw: dict[str, str] = dict(initial or {})

    def _read(self, key: str) -> str | None:
        return self.raw.get(key)

    def _write(self, key: str, raw: str) -> None:
        self.raw[key] = raw


class SqliteStore(KeyValueStore):
    """Store backed by the ``kv_store`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        self._engine.dispose()

    def _read(self, key: str) -> str | None:
        with self._engine.connect() as conn:
            return conn.execute(select(kv_store.c.value).where(kv_store.c.key == key)).scalar()

    def _write(self, key: str, raw: str) -> None:
        modified = datetime.now(UTC).isoformat()
        stmt = insert(kv_store).values(key=key, value=raw, modified=modified)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_store.c.key],
            set_={"value": stmt.excluded.value, "modified": stmt.excluded.modified},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)
