# tests/test_pow.py
"""End-to-end proof generation and validation with the recommended Argon2id parameters."""

from __future__ import annotations

from workproof.schemas.pow import HashParams
from workproof.services import difficulty_of, generate_proof, validate_proof
from workproof.utils.hash import identifier_from_public_key


def test_low_difficulty_round_trip(argon2_hasher):
    """32 zero bytes at difficulty 0.5 needs about three 16 MiB hashes."""
    identifier = bytes(32)
    params = HashParams(memory_bytes=16_777_216, iterations=1, lanes=1, output_bytes=16)

    proof = generate_proof(identifier, 0.5, 2, params, argon2_hasher, seed=b"\xdb")

    assert proof is not None
    assert validate_proof(identifier, proof, 0.5, params, argon2_hasher)
    achieved = difficulty_of(identifier, proof, params, argon2_hasher)
    assert achieved >= 0.5
    assert not validate_proof(identifier, proof, achieved + 0.01, params, argon2_hasher)


def test_public_key_identifier_round_trip(argon2_hasher, fast_params):
    identifier = identifier_from_public_key(b"ed25519 public key bytes")

    proof = generate_proof(identifier, 1.0, 1, fast_params, argon2_hasher)

    assert proof is not None
    assert validate_proof(identifier, proof, 1.0, fast_params, argon2_hasher)
