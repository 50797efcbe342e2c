"""Caller-facing proof-of-work API."""

from __future__ import annotations

import threading
from collections.abc import Sequence

from workproof.core.settings import Settings
from workproof.core.settings import settings as default_settings
from workproof.schemas.pow import HashParams, Proof
from workproof.services import validator
from workproof.services.orchestrator import run_search
from workproof.services.search import SearchResult
from workproof.utils.hash import HashFunction, get_hasher


def generate_proof(
    identifier: bytes,
    target_difficulty: float,
    worker_count: int,
    params: HashParams,
    hasher: HashFunction | None = None,
    *,
    cancel: threading.Event | None = None,
    timeout: float | None = None,
    seed: bytes | None = None,
    node_ids: Sequence[int] | None = None,
) -> Proof | None:
    """Search for a proof, blocking until one is found or the search stops.

    Returns:
        The first proof found, or None if the search was cancelled, timed out
        or exhausted every worker's counter space.
    """
    result = run_search(
        identifier,
        target_difficulty,
        worker_count,
        params,
        hasher,
        node_ids=node_ids,
        seed=seed,
        cancel=cancel,
        timeout=timeout,
    )
    return result.proof


def validate_proof(
    identifier: bytes,
    proof: Proof | bytes,
    target_difficulty: float,
    params: HashParams,
    hasher: HashFunction | None = None,
) -> bool:
    """Return True if ``proof`` meets ``target_difficulty`` for ``identifier``."""
    return validator.validate_proof(identifier, proof, target_difficulty, params, hasher)


def difficulty_of(
    identifier: bytes,
    proof: Proof | bytes,
    params: HashParams,
    hasher: HashFunction | None = None,
) -> float:
    """Return the difficulty ``proof`` achieves for ``identifier``."""
    return validator.difficulty_of(identifier, proof, params, hasher)


class PowService:
    """Proof generation and validation bound to one parameter set."""

    def __init__(
        self,
        params: HashParams | None = None,
        hasher: HashFunction | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._params = params or self._settings.hash_params
        self._hasher = hasher or get_hasher()

    @property
    def params(self) -> HashParams:
        """Hash parameters every proof from this service is made under."""
        return self._params

    def search(
        self,
        identifier: bytes,
        target_difficulty: float | None = None,
        worker_count: int | None = None,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
        seed: bytes | None = None,
    ) -> SearchResult:
        """Run a search with the configured defaults, returning the full result."""
        if target_difficulty is None:
            target_difficulty = self._settings.difficulty
        if worker_count is None:
            worker_count = self._settings.worker_count
        if timeout is None:
            timeout = self._settings.search_timeout_seconds
        return run_search(
            identifier,
            target_difficulty,
            worker_count,
            self._params,
            self._hasher,
            seed=seed,
            cancel=cancel,
            timeout=timeout,
        )

    def generate(
        self,
        identifier: bytes,
        target_difficulty: float | None = None,
        worker_count: int | None = None,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Proof | None:
        """Return a proof for ``identifier``, or None if the search stopped."""
        return self.search(
            identifier,
            target_difficulty,
            worker_count,
            cancel=cancel,
            timeout=timeout,
        ).proof

    def validate(
        self,
        identifier: bytes,
        proof: Proof | bytes,
        target_difficulty: float | None = None,
    ) -> bool:
        """Return True if ``proof`` meets the target for ``identifier``."""
        if target_difficulty is None:
            target_difficulty = self._settings.difficulty
        return validate_proof(identifier, proof, target_difficulty, self._params, self._hasher)

    def difficulty_of(self, identifier: bytes, proof: Proof | bytes) -> float:
        """Return the difficulty ``proof`` achieves for ``identifier``."""
        return difficulty_of(identifier, proof, self._params, self._hasher)


def get_pow_service() -> PowService:
    """Return a new proof-of-work service using the environment settings."""
    return PowService()
