"""Key-value storage backends behind the partition handles."""

from __future__ import annotations

import asyncio
import json
import sqlite3
import threading
from typing import Any, Protocol


class BackendPartition(Protocol):
    async def get_item(self, key: str) -> Any | None: ...

    async def set_item(self, key: str, value: Any) -> Any: ...

    async def get_items(self, keys: list[str]) -> list[Any | None]: ...


class StorageBackend(Protocol):
    def open_partition(self, database_name: str, partition_name: str) -> BackendPartition: ...


class SqliteBackend:
    """Stores every partition as rows of the ``kv_items`` table.

    Values are JSON documents. Statements run in a worker thread so the
    event loop is never blocked; a lock serializes access to the shared
    connection.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._lock = threading.Lock()

    def open_partition(self, database_name: str, partition_name: str) -> SqlitePartition:
        return SqlitePartition(self, database_name, partition_name)

    async def run(self, func, *args):
        return await asyncio.to_thread(self._locked, func, *args)

    def _locked(self, func, *args):
        with self._lock:
            return func(self._connection, *args)


class SqlitePartition:
    def __init__(self, backend: SqliteBackend, database_name: str, partition_name: str) -> None:
        self._backend = backend
        self._database_name = database_name
        self._partition_name = partition_name

    async def get_item(self, key: str) -> Any | None:
        return await self._backend.run(self._select_one, key)

    async def set_item(self, key: str, value: Any) -> Any:
        await self._backend.run(self._upsert, key, json.dumps(value, ensure_ascii=False))
        return value

    async def get_items(self, keys: list[str]) -> list[Any | None]:
        found = await self._backend.run(self._select_many, list(keys))
        return [found.get(key) for key in keys]

    def _select_one(self, connection: sqlite3.Connection, key: str) -> Any | None:
        row = connection.execute(
            """
            SELECT value FROM kv_items
            WHERE database_name = ? AND partition_name = ? AND key = ?
            """,
            (self._database_name, self._partition_name, key),
        ).fetchone()
        if row is None:
            return None
        return json.loads(row["value"])

    def _select_many(self, connection: sqlite3.Connection, keys: list[str]) -> dict[str, Any]:
        placeholders = ", ".join("?" for _ in keys)
        rows = connection.execute(
            f"""
            SELECT key, value FROM kv_items
            WHERE database_name = ? AND partition_name = ? AND key IN ({placeholders})
            """,
            (self._database_name, self._partition_name, *keys),
        ).fetchall()
        return {row["key"]: json.loads(row["value"]) for row in rows}

    def _upsert(self, connection: sqlite3.Connection, key: str, payload: str) -> None:
        with connection:
            connection.execute(
                """
                INSERT INTO kv_items (database_name, partition_name, key, value)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (database_name, partition_name, key)
                DO UPDATE SET value = excluded.value,
                              updated_at = CURRENT_TIMESTAMP
                """,
                (self._database_name, self._partition_name, key, payload),
            )
