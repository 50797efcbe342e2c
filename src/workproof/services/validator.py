"""Proof validation.

Validation is a single hash: recompute the search input from the proof,
hash it with the identifier as salt, and compare the difficulty with the
target. It needs nothing from the search that produced the proof.
"""

from __future__ import annotations

from workproof.core.difficulty import meets, score
from workproof.core.encoding import encode_salt
from workproof.schemas.pow import HashParams, Proof
from workproof.utils.hash import HashFunction, get_hasher


def _as_proof(proof: Proof | bytes) -> Proof:
    if isinstance(proof, Proof):
        return proof
    return Proof.from_bytes(proof)


def difficulty_of(
    identifier: bytes,
    proof: Proof | bytes,
    params: HashParams,
    hasher: HashFunction | None = None,
) -> float:
    """Return the difficulty a proof actually achieves for an identifier.

    Args:
        identifier: 32-byte identifier the proof claims to be bound to.
        proof: A ``Proof`` or its 20-byte serialisation.
        params: Hash parameters the proof was generated under.
        hasher: Hash primitive, the shared Argon2id hasher by default.

    Raises:
        InvalidInputLength: If the identifier or serialised proof is malformed.
        UnsupportedParameters: If the hasher rejects ``params``.
    """
    salt = encode_salt(identifier)
    password = _as_proof(proof).to_bytes()
    hasher = hasher or get_hasher()
    return score(hasher(password, salt, params))


def validate_proof(
    identifier: bytes,
    proof: Proof | bytes,
    target_difficulty: float,
    params: HashParams,
    hasher: HashFunction | None = None,
) -> bool:
    """Return True if ``proof`` reaches ``target_difficulty`` for ``identifier``."""
    return meets(difficulty_of(identifier, proof, params, hasher), target_difficulty)


def verify(
    proof: bytes,
    identifier: bytes,
    params: HashParams | None = None,
    hasher: HashFunction | None = None,
) -> float:
    """Return the difficulty of a serialised proof.

    Mirrors the generator API: ``proof`` is the 20-byte search input and
    ``params`` defaults to the recommended parameter set.
    """
    return difficulty_of(identifier, proof, params or HashParams(), hasher)
