"""SQLAlchemy Core table definitions for the pomogarden database.

Persistence is a flat key-value store: each preference or collection is
one JSON document under a string key.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),  # JSON
    Column("modified", Text, nullable=False),
)
