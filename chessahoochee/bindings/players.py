from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from PySide6.QtCore import QObject

from chessahoochee.bindings.base import RecordBinding, UpdateSource
from chessahoochee.db.repositories import PlayerRepository
from chessahoochee.domain.guards import ensure_number_list
from chessahoochee.domain.lookup import make_player_lookup
from chessahoochee.services.error_policy import IoErrorPolicy

logger = logging.getLogger(__name__)

PlayerLookup = Callable[[int | float], "dict[str, Any] | None"]


class PlayersBinding(RecordBinding):
    """Loads the players for a list of ids; read-only.

    Ids are compared by value, so binding an equal list again is free. An
    empty list does no I/O and keeps whatever was loaded before.
    """

    def __init__(
        self,
        repository: PlayerRepository,
        *,
        policy: IoErrorPolicy | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__([], policy=policy, parent=parent)
        self._repository = repository
        self._ids: tuple[int | float, ...] | None = None
        self._get_player: PlayerLookup = make_player_lookup([])

    @property
    def ids(self) -> tuple[int | float, ...] | None:
        return self._ids

    @property
    def players(self) -> list[dict[str, Any] | None]:
        return self._value

    @property
    def get_player(self) -> PlayerLookup:
        return self._get_player

    def state(self) -> tuple[list[dict[str, Any] | None], PlayerLookup]:
        return self._value, self._get_player

    def bind(self, ids: Sequence[int | float]) -> PlayersBinding:
        ids_key = tuple(ensure_number_list(ids, "ids"))
        if ids_key == self._ids:
            return self
        self._ids = ids_key
        if ids_key:
            self._start_load(ids_key)
        else:
            self._mark_bound()
        return self

    async def _read(self, key: tuple[int | float, ...]) -> list[dict[str, Any] | None]:
        return list(await self._repository.get_many(key))

    def _set_state(self, value: Any, source: UpdateSource, key: Any = None) -> None:
        self._get_player = make_player_lookup(value)
        logger.debug("player list was updated: %s", value)
        super()._set_state(value, source, key)
