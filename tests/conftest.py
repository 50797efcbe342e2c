# tests/conftest.py
from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable

import pytest

from workproof.core.encoding import decode_password
from workproof.schemas.pow import HashParams
from workproof.utils.hash import Argon2idHasher

# Smallest memory Argon2 accepts for one lane.
FAST_PARAMS = HashParams(memory_bytes=8 * 1024, iterations=1, lanes=1, output_bytes=16)

ZERO_OUTPUT = bytes(16)
MAX_OUTPUT = b"\xff" * 16


class Sha256Hasher:
    """Deterministic, salt-bound stand-in for Argon2id."""

    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, password: bytes, salt: bytes, params: HashParams) -> bytes:
        with self._lock:
            self.calls += 1
        digest = hashlib.sha256(password + salt + repr(params).encode()).digest()
        return digest[: params.output_bytes]


class ScriptedHasher:
    """Returns the maximum output for winning coordinates, zeros otherwise."""

    def __init__(self, wins: Callable[[int, int], bool]) -> None:
        self.wins = wins
        self.calls = 0
        self.seen: list[tuple[int, int]] = []
        self._lock = threading.Lock()

    def __call__(self, password: bytes, salt: bytes, params: HashParams) -> bytes:
        counter, node_id = decode_password(password)
        with self._lock:
            self.calls += 1
            self.seen.append((counter, node_id))
        return MAX_OUTPUT if self.wins(counter, node_id) else ZERO_OUTPUT


@pytest.fixture
def identifier() -> bytes:
    return bytes(32)


@pytest.fixture
def other_identifier() -> bytes:
    return b"\x01" * 32


@pytest.fixture
def params() -> HashParams:
    return HashParams()


@pytest.fixture
def fast_params() -> HashParams:
    return FAST_PARAMS


@pytest.fixture
def sha_hasher() -> Sha256Hasher:
    return Sha256Hasher()


@pytest.fixture
def argon2_hasher() -> Argon2idHasher:
    return Argon2idHasher()


@pytest.fixture
def scripted_hasher() -> Callable[[Callable[[int, int], bool]], ScriptedHasher]:
    """Factory for hashers that win exactly where ``wins(counter, node_id)`` is true."""
    return ScriptedHasher
