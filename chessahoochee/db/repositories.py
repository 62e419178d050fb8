"""Partition-backed repositories for the three entity categories."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Sequence

from chessahoochee.db.backend import SqliteBackend, StorageBackend
from chessahoochee.db.database import get_connection
from chessahoochee.db.partitions import DB_NAME, OPTIONS, PLAYERS, TOURNAMENTS, PartitionHandle
from chessahoochee.services import seeder
from chessahoochee.services.error_policy import IoErrorPolicy
from chessahoochee.settings import get_database_path, get_players_seed_path, get_tournaments_seed_path

logger = logging.getLogger(__name__)


class PlayerRepository:
    """Repository for player records keyed by player id."""

    def __init__(self, handle: PartitionHandle) -> None:
        self.handle = handle

    async def get(self, player_id: int) -> dict[str, Any] | None:
        return await self.handle.get(player_id)

    async def get_many(self, player_ids: Sequence[int]) -> list[dict[str, Any] | None]:
        return await self.handle.get_many(list(player_ids))

    async def save(self, player: dict[str, Any]) -> dict[str, Any]:
        return await self.handle.set(player["id"], player)


class OptionRepository:
    """Repository for scalar numeric options keyed by option name."""

    def __init__(self, handle: PartitionHandle) -> None:
        self.handle = handle

    async def get(self, key: str) -> Any | None:
        return await self.handle.get(key)

    async def save(self, key: str, value: int | float) -> int | float:
        return await self.handle.set(key, value)


class TournamentRepository:
    """Repository for tournament records keyed by tournament id."""

    def __init__(self, handle: PartitionHandle) -> None:
        self.handle = handle

    async def get(self, tournament_id: int) -> dict[str, Any] | None:
        return await self.handle.get(tournament_id)

    async def save(self, tournament_id: int, tournament: dict[str, Any]) -> dict[str, Any]:
        return await self.handle.set(tournament_id, tournament)


class Repositories:
    """Owns the partition handles for one database.

    Handles are opened once by :meth:`initialize` and kept for the lifetime
    of the object; there is no close.
    """

    def __init__(
        self,
        backend: StorageBackend,
        database_name: str = DB_NAME,
        policy: IoErrorPolicy | None = None,
    ) -> None:
        self._backend = backend
        self._database_name = database_name
        self._policy = policy
        self._players: PlayerRepository | None = None
        self._options: OptionRepository | None = None
        self._tournaments: TournamentRepository | None = None
        self.seed_tasks: list[asyncio.Task] = []

    def initialize(
        self,
        *,
        seed: bool = False,
        players_seed: list[dict[str, Any]] | None = None,
        tournaments_seed: list[dict[str, Any]] | None = None,
    ) -> Repositories:
        """Open the partitions; with ``seed`` also schedule seeding.

        Seeding is fire-and-forget and needs a running event loop. Without
        explicit datasets the configured seed files are used.
        """
        if self._players is None:
            self._players = PlayerRepository(PartitionHandle.open(self._backend, PLAYERS, self._database_name))
            self._options = OptionRepository(PartitionHandle.open(self._backend, OPTIONS, self._database_name))
            self._tournaments = TournamentRepository(
                PartitionHandle.open(self._backend, TOURNAMENTS, self._database_name)
            )
        if seed:
            self.seed_tasks = self._schedule_seeding(players_seed, tournaments_seed)
        return self

    def _schedule_seeding(
        self,
        players_seed: list[dict[str, Any]] | None,
        tournaments_seed: list[dict[str, Any]] | None,
    ) -> list[asyncio.Task]:
        if players_seed is None:
            players_seed = seeder.load_player_seed(get_players_seed_path())
        if tournaments_seed is None:
            tournaments_seed = seeder.load_tournament_seed(get_tournaments_seed_path())
        logger.info(
            "scheduling seed of %s players and %s tournaments", len(players_seed), len(tournaments_seed)
        )
        return [
            seeder.schedule_seed(self.players.handle, players_seed, seeder.player_id),
            seeder.schedule_seed(self.tournaments.handle, tournaments_seed, seeder.tournament_id),
        ]

    @property
    def policy(self) -> IoErrorPolicy:
        """The I/O error policy shared by bindings built over these repositories."""
        if self._policy is None:
            self._policy = IoErrorPolicy.from_settings()
        return self._policy

    @property
    def players(self) -> PlayerRepository:
        if self._players is None:
            raise RuntimeError("Repositories.initialize() has not been called")
        return self._players

    @property
    def options(self) -> OptionRepository:
        if self._options is None:
            raise RuntimeError("Repositories.initialize() has not been called")
        return self._options

    @property
    def tournaments(self) -> TournamentRepository:
        if self._tournaments is None:
            raise RuntimeError("Repositories.initialize() has not been called")
        return self._tournaments


def open_repositories(db_path: str | Path | None = None, database_name: str = DB_NAME) -> Repositories:
    """Build repositories over the SQLite backend at ``db_path``.

    Falls back to the configured database path. Call ``initialize()`` next.
    """
    if db_path is None:
        db_path = get_database_path()
    return Repositories(SqliteBackend(get_connection(db_path)), database_name)
