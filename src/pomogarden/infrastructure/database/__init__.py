"""SQLite database engine and key-value schema via SQLAlchemy Core."""

from pomogarden.infrastructure.database.engine import create_db_engine, init_database
from pomogarden.infrastructure.database.schema import kv_store, metadata

__all__ = [
    "create_db_engine",
    "init_database",
    "kv_store",
    "metadata",
]
