from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QObject

from chessahoochee.bindings.base import RecordBinding, UpdateSource
from chessahoochee.db.repositories import TournamentRepository
from chessahoochee.domain.guards import ensure_number
from chessahoochee.services.error_policy import IoErrorPolicy

logger = logging.getLogger(__name__)


class TournamentBinding(RecordBinding):
    """One full tournament record, replaced wholesale on every load.

    The record starts as an empty placeholder, which is never written.
    """

    def __init__(
        self,
        repository: TournamentRepository,
        *,
        policy: IoErrorPolicy | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__({}, policy=policy, parent=parent)
        self._repository = repository
        self._id: int | float | None = None

    @property
    def tournament_id(self) -> int | float | None:
        return self._id

    @property
    def tournament(self) -> dict[str, Any]:
        return self._value

    def state(self) -> tuple[dict[str, Any], Callable[[dict[str, Any]], None]]:
        return self._value, self.set_tournament

    def bind(self, tournament_id: int | float) -> TournamentBinding:
        tournament_id = ensure_number(tournament_id, "tournament id")
        if self._bound and tournament_id == self._id:
            return self
        self._id = tournament_id
        self._start_load(tournament_id)
        return self

    def set_tournament(self, tournament: dict[str, Any]) -> None:
        if self._id is None:
            raise RuntimeError("TournamentBinding.bind() has not been called")
        self._set_state(tournament, UpdateSource.USER, self._id)

    async def _read(self, key: int | float) -> dict[str, Any]:
        tournament = await self._repository.get(key)
        logger.debug("got tourney %s %s", key, tournament)
        if tournament is None:
            return {}
        return tournament

    async def _write(self, key: int | float, value: dict[str, Any]) -> None:
        await self._repository.save(key, value)
