from __future__ import annotations

from typing import Any, Callable, Sequence

Player = dict[str, Any]


def get_player_by_id(players: Sequence[Player | None], player_id: int | float) -> Player | None:
    for player in players:
        if player is not None and player.get("id") == player_id:
            return player
    return None


def make_player_lookup(players: Sequence[Player | None]) -> Callable[[int | float], Player | None]:
    """Return a lookup bound to a snapshot of ``players``."""
    snapshot = tuple(players)

    def get_player(player_id: int | float) -> Player | None:
        return get_player_by_id(snapshot, player_id)

    return get_player
