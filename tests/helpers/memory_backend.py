from __future__ import annotations

import asyncio
import copy
import sqlite3
from typing import Any


class MemoryBackend:
    """In-memory stand-in for the storage backend.

    ``calls`` records every operation. ``hold(operation, key)`` makes the
    matching call wait until the returned event is set, so tests can choose
    the order in which overlapping calls resolve. ``fail(operation)`` makes
    the next matching call raise ``sqlite3.OperationalError``.
    """

    def __init__(self) -> None:
        self.data: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple[str, str, object]] = []
        self._gates: dict[tuple[str, object], asyncio.Event] = {}
        self._failures: set[str] = set()

    def open_partition(self, database_name: str, partition_name: str) -> MemoryPartition:
        store = self.data.setdefault((database_name, partition_name), {})
        return MemoryPartition(self, partition_name, store)

    def partition(self, partition_name: str, database_name: str = "Chessahoochee") -> dict[str, Any]:
        return self.data.setdefault((database_name, partition_name), {})

    def hold(self, operation: str, key: object) -> asyncio.Event:
        event = asyncio.Event()
        self._gates[(operation, key)] = event
        return event

    def fail(self, operation: str) -> None:
        self._failures.add(operation)

    def count(self, operation: str, partition_name: str | None = None) -> int:
        return sum(
            1
            for op, name, _ in self.calls
            if op == operation and (partition_name is None or name == partition_name)
        )

    async def call(self, operation: str, partition_name: str, key: object) -> None:
        self.calls.append((operation, partition_name, key))
        gate = self._gates.pop((operation, key), None)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if operation in self._failures:
            self._failures.discard(operation)
            raise sqlite3.OperationalError(f"{operation} unavailable")


class MemoryPartition:
    def __init__(self, backend: MemoryBackend, partition_name: str, store: dict[str, Any]) -> None:
        self._backend = backend
        self._partition_name = partition_name
        self._store = store

    async def get_item(self, key: str) -> Any | None:
        await self._backend.call("get", self._partition_name, key)
        return copy.deepcopy(self._store.get(key))

    async def set_item(self, key: str, value: Any) -> Any:
        await self._backend.call("set", self._partition_name, key)
        self._store[key] = copy.deepcopy(value)
        return value

    async def get_items(self, keys: list[str]) -> list[Any | None]:
        await self._backend.call("get_many", self._partition_name, tuple(keys))
        return [copy.deepcopy(self._store.get(key)) for key in keys]
