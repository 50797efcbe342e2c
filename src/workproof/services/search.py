"""Single-worker proof search.

A worker owns one node id and walks the full 128-bit counter space from its
start counter: encode, hash, score, and stop on the first attempt that meets
the target. Workers with different node ids can never hash the same input, so
no counter partitioning is needed.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from enum import Enum

from workproof.core.difficulty import meets, score
from workproof.core.encoding import encode_password, encode_salt, increment_counter
from workproof.schemas.pow import HashParams, Proof
from workproof.utils.hash import HashFunction

logger = logging.getLogger(__name__)


class SearchStatus(Enum):
    """How a search ended."""

    FOUND = "found"
    EXHAUSTED = "exhausted"  # counter wrapped back to its start
    CANCELLED = "cancelled"


@dataclass
class SearchResult:
    """Outcome of a search.

    ``proof`` and ``difficulty`` are set only when ``status`` is FOUND.
    ``best_proof``/``best_difficulty`` track the hardest attempt seen, which
    is useful for telemetry when a search is cancelled.
    """

    status: SearchStatus
    proof: Proof | None = None
    difficulty: float | None = None
    attempts: int = 0
    best_proof: Proof | None = None
    best_difficulty: float = -math.inf

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND


def search(
    identifier: bytes,
    target_difficulty: float,
    node_id: int,
    start_counter: int,
    params: HashParams,
    hasher: HashFunction,
    cancel: threading.Event | None = None,
) -> SearchResult:
    """Search one node id's counter space for a proof.

    The loop has no iteration cap. Callers bound it with ``cancel``, which is
    checked once before every attempt.

    Args:
        identifier: 32-byte identifier the proof is bound to.
        target_difficulty: Minimum log10 difficulty to accept.
        node_id: This worker's node id.
        start_counter: First counter to try.
        params: Hash parameters shared with the validator.
        hasher: Hash primitive.
        cancel: Optional cancellation signal.

    Returns:
        A FOUND, EXHAUSTED or CANCELLED ``SearchResult``.

    Raises:
        InvalidInputLength: If the identifier, node id or counter is malformed.
        UnsupportedParameters: If the hasher rejects ``params``.
    """
    salt = encode_salt(identifier)
    # validates node_id and start_counter widths up front
    encode_password(start_counter, node_id)

    result = SearchResult(status=SearchStatus.CANCELLED)
    counter = start_counter
    logger.debug(
        "Worker %08x searching from counter %d for difficulty %.3f",
        node_id,
        start_counter,
        target_difficulty,
    )

    while cancel is None or not cancel.is_set():
        password = encode_password(counter, node_id)
        difficulty = score(hasher(password, salt, params))
        result.attempts += 1

        if difficulty > result.best_difficulty:
            result.best_difficulty = difficulty
            result.best_proof = Proof(counter=counter, node_id=node_id)

        if meets(difficulty, target_difficulty):
            result.status = SearchStatus.FOUND
            result.proof = Proof(counter=counter, node_id=node_id)
            result.difficulty = difficulty
            logger.debug(
                "Worker %08x found difficulty %.3f after %d attempts",
                node_id,
                difficulty,
                result.attempts,
            )
            return result

        counter = increment_counter(counter)
        if counter == start_counter:
            result.status = SearchStatus.EXHAUSTED
            logger.info("Worker %08x exhausted its counter space", node_id)
            return result

    logger.debug("Worker %08x cancelled after %d attempts", node_id, result.attempts)
    return result
