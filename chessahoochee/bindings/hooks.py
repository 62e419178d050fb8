"""Hook-shaped entry points for view code.

Each call builds a binding and binds it once. Views keep the returned
binding and call ``bind()`` again with their current arguments whenever they
render; only a changed key triggers a load.
"""

from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import QObject

from chessahoochee.bindings.option import OptionBinding
from chessahoochee.bindings.players import PlayersBinding
from chessahoochee.bindings.tournament import TournamentBinding
from chessahoochee.db.repositories import Repositories
from chessahoochee.services.error_policy import IoErrorPolicy


def use_players(
    repositories: Repositories,
    ids: Sequence[int | float],
    *,
    policy: IoErrorPolicy | None = None,
    parent: QObject | None = None,
) -> PlayersBinding:
    binding = PlayersBinding(repositories.players, policy=policy or repositories.policy, parent=parent)
    return binding.bind(ids)


def use_option(
    repositories: Repositories,
    key: str,
    default: int | float,
    *,
    policy: IoErrorPolicy | None = None,
    parent: QObject | None = None,
) -> OptionBinding:
    binding = OptionBinding(repositories.options, policy=policy or repositories.policy, parent=parent)
    return binding.bind(key, default)


def use_tournament(
    repositories: Repositories,
    tournament_id: int | float,
    *,
    policy: IoErrorPolicy | None = None,
    parent: QObject | None = None,
) -> TournamentBinding:
    binding = TournamentBinding(repositories.tournaments, policy=policy or repositories.policy, parent=parent)
    return binding.bind(tournament_id)
