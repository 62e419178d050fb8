"""Bulk upsert of static datasets into partitions at startup."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from openpyxl import load_workbook

from chessahoochee.db.partitions import PartitionHandle
from chessahoochee.domain.guards import TypeValidationError, ensure_number, to_key

logger = logging.getLogger(__name__)

PLAYER_LIST_FIELD = "playerList"


def player_id(record: dict[str, Any]) -> int | float:
    return ensure_number(record.get("id"), "player id")


def tournament_id(record: dict[str, Any]) -> int | float:
    return ensure_number(record.get("id"), "tournament id")


async def seed(
    handle: PartitionHandle,
    records: Iterable[dict[str, Any]],
    id_of: Callable[[dict[str, Any]], object],
) -> int:
    """Upsert every record under the string form of its id.

    Running it again with the same records rewrites identical values.
    """
    count = 0
    for record in records:
        await handle.set(to_key(id_of(record)), record)
        count += 1
    logger.info("seeded %s records into %s", count, handle.store_name)
    return count


def _log_seed_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("seeding failed: %s", exc, exc_info=exc)


def schedule_seed(
    handle: PartitionHandle,
    records: Iterable[dict[str, Any]],
    id_of: Callable[[dict[str, Any]], object],
) -> asyncio.Task:
    """Start seeding on the running loop without waiting for it."""
    task = asyncio.get_running_loop().create_task(seed(handle, list(records), id_of))
    task.add_done_callback(_log_seed_failure)
    return task


def _normalize_header(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_row_empty(row_values: list[object]) -> bool:
    return all(value is None or str(value).strip() == "" for value in row_values)


def _coerce_cell_id(value: object) -> object:
    # openpyxl hands back whole numbers typed as floats for some writers
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def load_players_xlsx(path: str | Path) -> list[dict[str, Any]]:
    """Read player records from the active sheet; the first row is the header."""
    workbook = load_workbook(str(path), read_only=True, data_only=True)
    try:
        sheet = workbook.active
        rows = sheet.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []
        headers = [_normalize_header(value) for value in header_row]
        if "id" not in headers:
            raise TypeValidationError(f"{path}: player sheet has no 'id' column")

        players: list[dict[str, Any]] = []
        for row in rows:
            row_values = list(row)
            if _is_row_empty(row_values):
                continue
            record = {
                header: value
                for header, value in zip(headers, row_values)
                if header
            }
            record["id"] = _coerce_cell_id(record.get("id"))
            player_id(record)
            players.append(record)
        return players
    finally:
        workbook.close()


def load_player_seed(path: str | Path) -> list[dict[str, Any]]:
    """Load the player seed from JSON (``{"playerList": [...]}``) or ``.xlsx``."""
    path = Path(path)
    if path.suffix.lower() == ".xlsx":
        return load_players_xlsx(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get(PLAYER_LIST_FIELD), list):
        raise TypeValidationError(f"{path}: expected an object with a '{PLAYER_LIST_FIELD}' list")
    players = data[PLAYER_LIST_FIELD]
    for record in players:
        player_id(record)
    return players


def load_tournament_seed(path: str | Path) -> list[dict[str, Any]]:
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise TypeValidationError(f"{path}: expected a list of tournaments")
    for record in data:
        tournament_id(record)
    return data
