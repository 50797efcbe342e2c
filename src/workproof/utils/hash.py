# src/workproof/utils/hash.py
"""Hashing helpers: the Argon2id proof-of-work primitive and identifier digests."""

from __future__ import annotations

import logging
import threading
from typing import Final, Protocol

from argon2.exceptions import HashingError
from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw
from blake3 import blake3

from workproof.core.encoding import PASSWORD_BYTES, SALT_BYTES
from workproof.core.errors import InvalidInputLength, UnsupportedParameters
from workproof.schemas.pow import HashParams

KIB: Final[int] = 1024
IDENTIFIER_BYTES: Final[int] = SALT_BYTES

logger = logging.getLogger(__name__)


class HashFunction(Protocol):
    """The single capability the proof-of-work layer needs from a hash."""

    def __call__(self, password: bytes, salt: bytes, params: HashParams) -> bytes: ...


class Argon2idHasher:
    """Argon2id (v0x13) backed by ``argon2-cffi``.

    Each call allocates its own scratch memory inside the C library, so one
    instance can be shared by any number of worker threads.
    """

    argon2_type: Final = Type.ID
    version: Final[int] = ARGON2_VERSION

    def __init__(self) -> None:
        self._checked: set[HashParams] = set()
        self._lock = threading.Lock()

    def __call__(self, password: bytes, salt: bytes, params: HashParams) -> bytes:
        """Hash one search input.

        Args:
            password: 20-byte search input.
            salt: 32-byte identifier.
            params: Argon2id cost parameters.

        Returns:
            ``params.output_bytes`` bytes of raw hash output.

        Raises:
            InvalidInputLength: If the password or salt has the wrong size.
            UnsupportedParameters: If Argon2 rejects ``params``.
        """
        if len(password) != PASSWORD_BYTES:
            raise InvalidInputLength("search input", PASSWORD_BYTES, len(password))
        if len(salt) != SALT_BYTES:
            raise InvalidInputLength("identifier", SALT_BYTES, len(salt))
        if params.memory_bytes % KIB:
            raise UnsupportedParameters(
                f"memory_bytes must be a whole number of KiB, got {params.memory_bytes}"
            )
        try:
            return hash_secret_raw(
                secret=password,
                salt=salt,
                time_cost=params.iterations,
                memory_cost=params.memory_kib,
                parallelism=params.lanes,
                hash_len=params.output_bytes,
                type=self.argon2_type,
                version=self.version,
            )
        except (HashingError, OverflowError, ValueError) as e:
            raise UnsupportedParameters(f"argon2 rejected {params!r}: {e}") from e

    def check(self, params: HashParams) -> None:
        """Fail fast if ``params`` cannot be hashed.

        Runs one probe hash the first time a parameter set is seen.

        Raises:
            UnsupportedParameters: If Argon2 rejects ``params``.
        """
        with self._lock:
            if params in self._checked:
                return
        self(bytes(PASSWORD_BYTES), bytes(SALT_BYTES), params)
        with self._lock:
            self._checked.add(params)
        logger.debug("Argon2id parameters accepted: %r", params)


def check_params(hasher: HashFunction, params: HashParams, salt: bytes = bytes(SALT_BYTES)) -> None:
    """Fail fast if ``hasher`` cannot hash with ``params``.

    Makes one probe call through the hasher. ``Argon2idHasher`` remembers the
    parameter sets it has already accepted.

    Raises:
        UnsupportedParameters: If the hash primitive rejects ``params``.
    """
    if isinstance(hasher, Argon2idHasher):
        hasher.check(params)
        return
    hasher(bytes(PASSWORD_BYTES), salt, params)


_default_hasher: Argon2idHasher | None = None


def get_hasher() -> Argon2idHasher:
    """Return a shared ``Argon2idHasher`` instance."""
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = Argon2idHasher()
    return _default_hasher


def identifier_from_public_key(public_key: bytes) -> bytes:
    """Derive a 32-byte identifier from a public key of any length."""
    if not public_key:
        raise InvalidInputLength("public key", "at least 1", 0)
    return blake3(public_key).digest()


def identifier_from_hex(value: str) -> bytes:
    """Decode a hex identifier and check its length."""
    identifier = bytes.fromhex(value)
    if len(identifier) != IDENTIFIER_BYTES:
        raise InvalidInputLength("identifier", IDENTIFIER_BYTES, len(identifier))
    return identifier
