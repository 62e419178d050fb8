"""Database schema definitions."""

from __future__ import annotations

import sqlite3

KV_ITEMS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS kv_items (
    database_name TEXT NOT NULL,
    partition_name TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (database_name, partition_name, key)
);
"""

KV_ITEMS_INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_kv_items_partition ON kv_items (database_name, partition_name);",
]


SCHEMA_SQL = [
    KV_ITEMS_TABLE_SQL,
    *KV_ITEMS_INDEXES_SQL,
]


def initialize_schema(connection: sqlite3.Connection) -> None:
    """Initialize database schema if needed."""
    with connection:
        for statement in SCHEMA_SQL:
            connection.execute(statement)
