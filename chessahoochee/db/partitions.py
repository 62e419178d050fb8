"""Named, independently addressable key-value partitions."""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Sequence

from chessahoochee.db.backend import BackendPartition, StorageBackend
from chessahoochee.domain.guards import to_key

logger = logging.getLogger(__name__)

DB_NAME = "Chessahoochee"

PLAYERS = "Players"
OPTIONS = "Options"
TOURNAMENTS = "Tournaments"

PARTITION_NAMES = [PLAYERS, OPTIONS, TOURNAMENTS]

# Failures a backend may raise for an unavailable, full or corrupt store.
BACKEND_ERRORS = (sqlite3.Error, OSError, json.JSONDecodeError)


class StoreError(RuntimeError):
    def __init__(self, operation: str, partition: str, key: object, cause: BaseException) -> None:
        super().__init__(f"{operation} failed on {partition}[{key!r}]: {cause}")
        self.operation = operation
        self.partition = partition
        self.key = key
        self.cause = cause


class PartitionHandle:
    def __init__(self, store_name: str, partition: BackendPartition, database_name: str = DB_NAME) -> None:
        self.store_name = store_name
        self.database_name = database_name
        self._partition = partition

    @classmethod
    def open(
        cls,
        backend: StorageBackend,
        store_name: str,
        database_name: str = DB_NAME,
    ) -> PartitionHandle:
        partition = backend.open_partition(database_name, store_name)
        logger.debug("opened partition %s/%s", database_name, store_name)
        return cls(store_name, partition, database_name)

    async def get(self, key: object) -> Any | None:
        key_str = to_key(key)
        try:
            return await self._partition.get_item(key_str)
        except BACKEND_ERRORS as exc:
            raise StoreError("get", self.store_name, key_str, exc) from exc

    async def set(self, key: object, value: Any) -> Any:
        key_str = to_key(key)
        try:
            return await self._partition.set_item(key_str, value)
        except (*BACKEND_ERRORS, TypeError, ValueError) as exc:
            raise StoreError("set", self.store_name, key_str, exc) from exc

    async def get_many(self, keys: Sequence[object]) -> list[Any | None]:
        if not keys:
            raise ValueError("get_many requires at least one key")
        key_strs = [to_key(key) for key in keys]
        try:
            values = await self._partition.get_items(key_strs)
        except BACKEND_ERRORS as exc:
            raise StoreError("get_many", self.store_name, key_strs, exc) from exc
        if isinstance(values, dict):
            return [values.get(key) for key in key_strs]
        values = list(values)
        if len(values) != len(key_strs):
            raise StoreError(
                "get_many",
                self.store_name,
                key_strs,
                ValueError(f"backend returned {len(values)} values for {len(key_strs)} keys"),
            )
        return values
