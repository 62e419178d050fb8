import asyncio
from pathlib import Path

from chessahoochee.__main__ import main
from chessahoochee.bindings.hooks import use_option, use_players, use_tournament
from chessahoochee.db.repositories import open_repositories
from chessahoochee.services.error_policy import IoErrorPolicy


def test_main_seeds_configured_database(tmp_path: Path, monkeypatch) -> None:
    db_path = tmp_path / "smoke.db"
    monkeypatch.setenv("CHESSAHOOCHEE_DB_PATH", str(db_path))

    assert main() == 0

    async def scenario():
        repositories = open_repositories(db_path).initialize()
        players = use_players(repositories, [2, 1], policy=IoErrorPolicy.RAISE)
        tournament = use_tournament(repositories, 0, policy=IoErrorPolicy.RAISE)
        round_count = use_option(repositories, "roundCount", 5, policy=IoErrorPolicy.RAISE)
        for binding in (players, tournament, round_count):
            await binding.settled()
        return players, tournament, round_count

    players, tournament, round_count = asyncio.run(scenario())

    assert [player["id"] for player in players.players] == [2, 1]
    assert players.get_player(2)["firstName"] == "Marie"
    assert tournament.tournament["name"] == "Chessahoochee Spring Open"
    assert round_count.value == 5
