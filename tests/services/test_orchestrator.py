"""Tests for the multi-worker proof search."""

from __future__ import annotations

import threading
import time

import pytest

from workproof.core.errors import InvalidInputLength, UnsupportedParameters
from workproof.schemas.pow import HashParams
from workproof.services import orchestrator
from workproof.services import search as search_module
from workproof.services.orchestrator import assign_workers, run_search
from workproof.services.search import SearchStatus

SEED = b"\xdb" * 20


class TestAssignWorkers:
    """Tests for node id assignment."""

    def test_node_ids_are_distinct(self):
        workers = assign_workers(64, SEED)
        assert len(workers) == 64
        assert len({node_id for _, node_id in workers}) == 64

    def test_same_seed_gives_same_assignment(self):
        assert assign_workers(4, SEED) == assign_workers(4, SEED)

    def test_colliding_node_ids_are_deduplicated(self, monkeypatch):
        monkeypatch.setattr(
            orchestrator, "start_points", lambda count, seed: iter([(0, 2**32 - 1)] * count)
        )
        workers = assign_workers(3, SEED)
        assert [node_id for _, node_id in workers] == [2**32 - 1, 0, 1]

    def test_explicit_node_ids(self):
        workers = assign_workers(3, SEED, node_ids=[10, 20, 30])
        assert [node_id for _, node_id in workers] == [10, 20, 30]

    @pytest.mark.parametrize(
        ("count", "node_ids"),
        [
            (0, None),
            (2**32 + 1, None),
            (2, [1, 1]),
            (2, [1]),
            (1, [2**32]),
            (1, [-1]),
        ],
    )
    def test_invalid_requests_are_rejected(self, count, node_ids):
        with pytest.raises(ValueError):
            assign_workers(count, SEED, node_ids=node_ids)


def test_first_found_proof_wins_and_stops_other_workers(identifier, params, scripted_hasher):
    hasher = scripted_hasher(lambda counter, node_id: node_id == 20)

    result = run_search(identifier, 3.0, 3, params, hasher, node_ids=[10, 20, 30], seed=SEED)

    assert result.status is SearchStatus.FOUND
    assert result.proof.node_id == 20
    assert result.difficulty == float("inf")
    # the first call is the parameter check
    assert result.attempts == hasher.calls - 1


def test_workers_never_share_a_search_input(identifier, params, scripted_hasher):
    cancel = threading.Event()

    def wins(counter: int, node_id: int) -> bool:
        time.sleep(0.001)
        if hasher.calls >= 40:
            cancel.set()
        return False

    hasher = scripted_hasher(wins)
    result = run_search(identifier, 1.0, 4, params, hasher, seed=SEED, cancel=cancel)

    assert result.status is SearchStatus.CANCELLED
    attempts = hasher.seen[1:]
    assert len(set(attempts)) == len(attempts)
    assert len({node_id for _, node_id in attempts}) == 4
    assert cancel.is_set()


def test_all_workers_exhausted(identifier, params, scripted_hasher, monkeypatch):
    monkeypatch.setattr(search_module, "increment_counter", lambda counter: (counter + 1) % 4)
    monkeypatch.setattr(orchestrator, "start_points", lambda count, seed: iter([(3, 0)] * count))
    hasher = scripted_hasher(lambda counter, node_id: False)

    result = run_search(identifier, 1.0, 2, params, hasher, node_ids=[1, 2])

    assert result.status is SearchStatus.EXHAUSTED
    assert result.proof is None
    assert result.attempts == 8


def test_timeout_cancels_search(identifier, params, scripted_hasher):
    def wins(counter: int, node_id: int) -> bool:
        time.sleep(0.005)
        return False

    started = time.monotonic()
    result = run_search(identifier, 1.0, 2, params, scripted_hasher(wins), seed=SEED, timeout=0.05)

    assert result.status is SearchStatus.CANCELLED
    assert result.attempts > 0
    assert time.monotonic() - started < 5.0


def test_unsupported_params_fail_before_any_worker(identifier, params, scripted_hasher):
    def wins(counter: int, node_id: int) -> bool:
        raise UnsupportedParameters("memory too small")

    hasher = scripted_hasher(wins)
    with pytest.raises(UnsupportedParameters):
        run_search(identifier, 1.0, 2, params, hasher)
    assert hasher.calls == 1


def test_argon2_rejection_fails_before_any_worker(identifier, argon2_hasher):
    with pytest.raises(UnsupportedParameters):
        run_search(identifier, 1.0, 2, HashParams(memory_bytes=1024), argon2_hasher)


def test_invalid_identifier_fails_fast(params, scripted_hasher):
    hasher = scripted_hasher(lambda counter, node_id: True)
    with pytest.raises(InvalidInputLength):
        run_search(bytes(16), 1.0, 1, params, hasher)
    assert hasher.calls == 0


def test_worker_errors_propagate(identifier, params, scripted_hasher):
    def wins(counter: int, node_id: int) -> bool:
        if node_id in (1, 2):
            raise RuntimeError("hash failed")
        return False

    with pytest.raises(RuntimeError, match="hash failed"):
        run_search(identifier, 1.0, 2, params, scripted_hasher(wins), node_ids=[1, 2])


def test_real_argon2_parallel_search(identifier, fast_params, argon2_hasher):
    result = run_search(identifier, 0.5, 2, fast_params, argon2_hasher, seed=SEED)
    assert result.found
    assert result.difficulty >= 0.5
