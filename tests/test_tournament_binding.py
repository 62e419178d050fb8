import asyncio

import pytest

from chessahoochee.bindings.hooks import use_tournament
from chessahoochee.bindings.tournament import TournamentBinding
from chessahoochee.db.partitions import TOURNAMENTS
from chessahoochee.db.repositories import Repositories
from chessahoochee.domain.guards import TypeValidationError
from chessahoochee.services.error_policy import IoErrorPolicy
from tests.helpers.loop import wait_until
from tests.helpers.memory_backend import MemoryBackend

SPRING_OPEN = {"id": 1, "name": "Spring Open", "roundCount": 4, "roundList": []}
FALL_CLASSIC = {"id": 2, "name": "Fall Classic", "roundCount": 5, "roundList": []}


def _setup() -> tuple[MemoryBackend, Repositories]:
    backend = MemoryBackend()
    backend.partition(TOURNAMENTS).update({"1": SPRING_OPEN, "2": FALL_CLASSIC})
    return backend, Repositories(backend).initialize()


def test_written_tournament_reloads_equal() -> None:
    _, repositories = _setup()

    async def scenario():
        binding = use_tournament(repositories, 42, policy=IoErrorPolicy.LOG)
        await binding.settled()
        tournament, set_tournament = binding.state()
        assert tournament == {}
        set_tournament({"id": 42, "rounds": []})
        await binding.settled()

        fresh = use_tournament(repositories, 42, policy=IoErrorPolicy.LOG)
        await fresh.settled()
        return fresh.tournament

    assert asyncio.run(scenario()) == {"id": 42, "rounds": []}


def test_placeholder_is_never_written() -> None:
    backend, repositories = _setup()

    async def scenario():
        binding = use_tournament(repositories, 5, policy=IoErrorPolicy.LOG)
        await binding.settled()
        return binding

    binding = asyncio.run(scenario())

    assert binding.tournament == {}
    assert backend.count("set") == 0
    assert "5" not in backend.partition(TOURNAMENTS)


def test_load_replaces_record_wholesale() -> None:
    _, repositories = _setup()

    async def scenario():
        binding = use_tournament(repositories, 1, policy=IoErrorPolicy.LOG)
        await binding.settled()
        assert binding.tournament == SPRING_OPEN
        binding.bind(7)
        await binding.settled()
        return binding

    assert asyncio.run(scenario()).tournament == {}


def test_setter_writes_under_the_bound_id() -> None:
    backend, repositories = _setup()

    async def scenario():
        binding = use_tournament(repositories, 2, policy=IoErrorPolicy.LOG)
        await binding.settled()
        binding.set_tournament({**binding.tournament, "roundCount": 6})
        await binding.settled()

    asyncio.run(scenario())

    assert backend.partition(TOURNAMENTS)["2"]["roundCount"] == 6
    assert backend.partition(TOURNAMENTS)["1"] == SPRING_OPEN


def test_slow_earlier_load_overwrites_faster_later_load() -> None:
    backend, repositories = _setup()

    async def scenario():
        first_gate = backend.hold("get", "1")
        second_gate = backend.hold("get", "2")
        binding = use_tournament(repositories, 1, policy=IoErrorPolicy.LOG)
        binding.bind(2)

        second_gate.set()
        await wait_until(lambda: binding.tournament == FALL_CLASSIC)
        first_gate.set()
        await binding.settled()
        return binding

    binding = asyncio.run(scenario())

    assert binding.tournament_id == 2
    assert binding.tournament == SPRING_OPEN


def test_setter_requires_a_bound_id() -> None:
    _, repositories = _setup()
    binding = TournamentBinding(repositories.tournaments, policy=IoErrorPolicy.LOG)

    with pytest.raises(RuntimeError):
        binding.set_tournament({"id": 1})


def test_non_numeric_id_fails_before_any_io() -> None:
    backend, repositories = _setup()

    async def scenario():
        with pytest.raises(TypeValidationError):
            use_tournament(repositories, "1", policy=IoErrorPolicy.LOG)

    asyncio.run(scenario())

    assert backend.calls == []


def test_edit_during_load_is_kept_in_memory_and_store() -> None:
    backend, repositories = _setup()

    async def scenario():
        gate = backend.hold("get", "42")
        binding = use_tournament(repositories, 42, policy=IoErrorPolicy.LOG)
        binding.set_tournament({"id": 42, "rounds": [1]})
        gate.set()
        await binding.settled()
        return binding

    binding = asyncio.run(scenario())

    assert binding.tournament == {"id": 42, "rounds": [1]}
    assert backend.partition(TOURNAMENTS)["42"] == {"id": 42, "rounds": [1]}


def test_edit_for_other_id_does_not_drop_load() -> None:
    backend, repositories = _setup()

    async def scenario():
        gate = backend.hold("get", "2")
        binding = use_tournament(repositories, 1, policy=IoErrorPolicy.LOG)
        await binding.settled()
        binding.set_tournament({**SPRING_OPEN, "roundCount": 3})
        binding.bind(2)
        gate.set()
        await binding.settled()
        return binding

    binding = asyncio.run(scenario())

    assert binding.tournament == FALL_CLASSIC
    assert backend.partition(TOURNAMENTS)["1"]["roundCount"] == 3
