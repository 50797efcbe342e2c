#!/usr/bin/env python3
"""Demonstration of Argon2id proof-of-work for a public key.

This script shows how to:
1. Derive a 32-byte identifier from a public key
2. Search for a proof in parallel at a low difficulty
3. Validate the proof and report the difficulty it achieved

Usage:
    python examples/proof_demo.py [difficulty]
"""

import sys
import time

# Add the src directory to the path so we can import workproof modules
sys.path.insert(0, "src")

from workproof.core.difficulty import expected_attempts
from workproof.core.settings import settings
from workproof.services.orchestrator import run_search
from workproof.services.validator import difficulty_of, validate_proof
from workproof.utils.hash import get_hasher, identifier_from_public_key


def demonstrate_proof_workflow(target_difficulty: float) -> bool:
    """Generate and validate one proof."""
    print("Argon2id Proof-of-Work Demonstration")
    print("=" * 50)

    public_key = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")
    identifier = identifier_from_public_key(public_key)
    params = settings.hash_params
    hasher = get_hasher()

    print(f"Identifier: {identifier.hex()}")
    print(f"Parameters: {params!r}")
    print(f"Target difficulty: {target_difficulty} (~{expected_attempts(target_difficulty):.0f} hashes)")
    print(f"Workers: {settings.worker_count}")
    print()

    started = time.monotonic()
    result = run_search(identifier, target_difficulty, settings.worker_count, params, hasher)
    elapsed = time.monotonic() - started

    if not result.found:
        print(f"No proof found: {result.status.value}")
        return False

    print(f"Proof found in {elapsed:.2f}s after {result.attempts} hashes")
    print(f"  counter: {result.proof.counter}")
    print(f"  node id: {result.proof.node_id:08x}")
    print(f"  serialised: {result.proof.hex()}")
    print()

    achieved = difficulty_of(identifier, result.proof, params, hasher)
    valid = validate_proof(identifier, result.proof, target_difficulty, params, hasher)
    print(f"Validated: {valid} (achieved difficulty {achieved:.3f})")
    return valid


if __name__ == "__main__":
    difficulty = float(sys.argv[1]) if len(sys.argv) > 1 else 1.0
    sys.exit(0 if demonstrate_proof_workflow(difficulty) else 1)
