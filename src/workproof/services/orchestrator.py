"""Parallel proof search.

Runs one ``search`` per node id on a thread pool and returns the first proof
found. Workers share nothing but read-only inputs and a single internal stop
event; Argon2 releases the GIL while hashing, so threads hash in parallel.
Each worker allocates ``params.memory_bytes`` of scratch memory per attempt.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from collections.abc import Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from workproof.core.difficulty import expected_attempts
from workproof.core.encoding import NODE_ID_MODULUS, PASSWORD_BYTES, encode_salt
from workproof.schemas.pow import HashParams
from workproof.services.generator import start_points
from workproof.services.search import SearchResult, SearchStatus, search
from workproof.utils.hash import HashFunction, check_params, get_hasher

CANCEL_POLL_SECONDS = 0.05

logger = logging.getLogger(__name__)


def assign_workers(
    worker_count: int,
    seed: bytes | None = None,
    node_ids: Sequence[int] | None = None,
) -> list[tuple[int, int]]:
    """Return one distinct ``(start_counter, node_id)`` pair per worker.

    Args:
        worker_count: Number of workers, between 1 and 2**32.
        seed: Seed for the starting coordinates; random when omitted.
        node_ids: Explicit node ids, one per worker. They must be distinct.

    Raises:
        ValueError: If the worker count or node ids cannot give every worker
            its own node id.
    """
    if not 1 <= worker_count <= NODE_ID_MODULUS:
        raise ValueError(f"worker_count must be between 1 and {NODE_ID_MODULUS}, got {worker_count}")
    if seed is None:
        seed = secrets.token_bytes(PASSWORD_BYTES)
    points = list(start_points(worker_count, seed))

    if node_ids is not None:
        if len(node_ids) != worker_count:
            raise ValueError(f"expected {worker_count} node ids, got {len(node_ids)}")
        if len(set(node_ids)) != len(node_ids):
            raise ValueError("node ids must be distinct")
        for node_id in node_ids:
            if not 0 <= node_id < NODE_ID_MODULUS:
                raise ValueError(f"node id {node_id} is outside [0, {NODE_ID_MODULUS})")
        return [(counter, node_id) for (counter, _), node_id in zip(points, node_ids)]

    assigned: list[tuple[int, int]] = []
    used: set[int] = set()
    for counter, node_id in points:
        while node_id in used:
            node_id = (node_id + 1) % NODE_ID_MODULUS
        used.add(node_id)
        assigned.append((counter, node_id))
    return assigned


def run_search(
    identifier: bytes,
    target_difficulty: float,
    worker_count: int,
    params: HashParams,
    hasher: HashFunction | None = None,
    *,
    node_ids: Sequence[int] | None = None,
    seed: bytes | None = None,
    cancel: threading.Event | None = None,
    timeout: float | None = None,
) -> SearchResult:
    """Race ``worker_count`` workers for a proof.

    Args:
        identifier: 32-byte identifier to bind the proof to.
        target_difficulty: Minimum log10 difficulty to accept.
        worker_count: Number of parallel workers.
        params: Hash parameters shared with the validator.
        hasher: Hash primitive, the shared Argon2id hasher by default.
        node_ids: Explicit distinct node ids, one per worker.
        seed: Seed for the starting coordinates.
        cancel: Caller-owned cancellation event, polled while the search
            runs. Setting it stops every worker at its next attempt. The
            search never sets it, so one event can be reused across calls.
        timeout: Seconds after which the search is cancelled.

    Returns:
        The winning worker's FOUND result, or an EXHAUSTED/CANCELLED result
        with the attempt counts and best difficulty of all workers combined.

    Raises:
        InvalidInputLength: If the identifier is not 32 bytes.
        UnsupportedParameters: If the hasher rejects ``params``. Raised before
            any worker starts.
        ValueError: If the workers cannot be given distinct node ids.
    """
    salt = encode_salt(identifier)
    hasher = hasher or get_hasher()
    check_params(hasher, params, salt)
    workers = assign_workers(worker_count, seed, node_ids)
    stop = threading.Event()
    if cancel is not None and cancel.is_set():
        logger.warning("Cancellation event already set; search will stop immediately")
        stop.set()

    logger.info(
        "Searching for difficulty %.3f with %d workers (~%.3g attempts expected)",
        target_difficulty,
        worker_count,
        expected_attempts(target_difficulty),
    )
    started = time.monotonic()
    deadline = None if timeout is None else started + timeout

    with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="workproof") as pool:
        pending: set[Future[SearchResult]] = {
            pool.submit(
                search,
                identifier,
                target_difficulty,
                node_id,
                counter,
                params,
                hasher,
                stop,
            )
            for counter, node_id in workers
        }
        finished: list[SearchResult] = []
        winner: SearchResult | None = None
        try:
            while pending:
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                if cancel is not None:
                    remaining = (
                        CANCEL_POLL_SECONDS if remaining is None else min(remaining, CANCEL_POLL_SECONDS)
                    )
                done, pending = wait(pending, timeout=remaining, return_when=FIRST_COMPLETED)
                if cancel is not None and cancel.is_set() and not stop.is_set():
                    logger.info("Search cancelled by caller")
                    stop.set()
                if deadline is not None and time.monotonic() >= deadline and not stop.is_set():
                    logger.info("Search timed out after %.1fs", timeout)
                    stop.set()
                    deadline = None
                for future in done:
                    result = future.result()
                    finished.append(result)
                    if winner is None and result.found:
                        winner = result
                        stop.set()
        finally:
            # stop remaining workers if a worker raised
            stop.set()

    elapsed = time.monotonic() - started
    total = _combine(finished)
    if winner is not None:
        winner.attempts = total.attempts
        logger.info(
            "Found proof with difficulty %.3f (node %08x) after %d attempts in %.2fs",
            winner.difficulty,
            winner.proof.node_id,
            winner.attempts,
            elapsed,
        )
        return winner

    logger.info(
        "Search %s after %d attempts in %.2fs (best difficulty %.3f)",
        total.status.value,
        total.attempts,
        elapsed,
        total.best_difficulty,
    )
    return total


def _combine(results: Sequence[SearchResult]) -> SearchResult:
    """Merge per-worker results that did not find a proof."""
    exhausted = bool(results) and all(r.status is SearchStatus.EXHAUSTED for r in results)
    combined = SearchResult(
        status=SearchStatus.EXHAUSTED if exhausted else SearchStatus.CANCELLED,
        attempts=sum(r.attempts for r in results),
    )
    for result in results:
        if result.best_difficulty > combined.best_difficulty:
            combined.best_difficulty = result.best_difficulty
            combined.best_proof = result.best_proof
    return combined
