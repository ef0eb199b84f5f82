"""Database engine setup for SQLite with WAL mode.

The DB is stored at {data_root}/.pomogarden/pomogarden.db.

SQLAlchemy Core (not ORM) is used because the store is a single
key-value table — no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from pomogarden.infrastructure.database.schema import metadata

STATE_DIRNAME = ".pomogarden"
DB_FILENAME = "pomogarden.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(data_root: Path) -> Engine:
    """Initialize the database at ``{data_root}/.pomogarden/pomogarden.db``.

    Creates the ``.pomogarden/`` directory (with a ``plugins/`` folder
    for local plugins) and all tables from :data:`schema.metadata`.

    Idempotent — safe to call on an existing data root.

    Returns the engine ready for use.
    """
    state_dir = data_root / STATE_DIRNAME
    state_dir.mkdir(parents=True, exist_ok=True)
    (state_dir / "plugins").mkdir(exist_ok=True)

    engine = create_db_engine(state_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
