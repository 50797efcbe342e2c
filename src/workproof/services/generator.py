"""Stateful proof generators.

``WorkProof.init`` spreads ``count`` generators over the counter and node id
spaces from a short seed, so that independent processes started with
different seeds (or parallel threads sharing one seed) begin far apart.
Callers step each generator with ``advance`` and keep the proof once its
difficulty is acceptable.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from typing import Final

from workproof.core.encoding import (
    COUNTER_MAX,
    COUNTER_MODULUS,
    NODE_ID_MAX,
    NODE_ID_MODULUS,
    PASSWORD_BYTES,
    decode_password,
    encode_password,
    encode_salt,
    increment_counter,
)
from workproof.core.errors import InvalidInputLength
from workproof.schemas.pow import HashParams, Proof
from workproof.services.validator import difficulty_of, verify
from workproof.utils.hash import HashFunction, get_hasher

logger = logging.getLogger(__name__)

# Per-generator starting-point jitter, cycled.
COUNTER_JITTER: Final[tuple[int, ...]] = (
    232948893588309592072343451646495443470,
    241772077400251990428921465086427460406,
    135466609762431670297680858806122516196,
    23843965500601499676577714028275613566,
    3980925650203285922593180965914241295,
    276996438161600802308531502845602322760,
    102314981229339036363969651202596767324,
    173696929416818359727323669108240964699,
    248234049680437024180525977804398658061,
    182129205137478248958828934085226751428,
    226858282864963269134484634927244451740,
    317700656064443789738604527115780206566,
    257667444946452812601551143022268928116,
)

NODE_ID_JITTER: Final[tuple[int, ...]] = (
    2633617217, 1710307616, 3543087939, 3370472175, 2302495969, 1171085216,
    3321642826, 3518920782, 1060944841, 2907445434, 2811178615, 2842243822,
    563823965,
)


def expand_seed(seed: bytes) -> bytes:
    """Repeat a 1..20 byte seed cyclically to fill a 20-byte search input."""
    if not 1 <= len(seed) <= PASSWORD_BYTES:
        raise InvalidInputLength("seed", f"between 1 and {PASSWORD_BYTES}", len(seed))
    return bytes(itertools.islice(itertools.cycle(seed), PASSWORD_BYTES))


def start_points(count: int, seed: bytes) -> Iterator[tuple[int, int]]:
    """Yield ``count`` spread-out ``(counter, node_id)`` starting coordinates.

    The node ids yielded here are not guaranteed distinct; callers that run
    the points concurrently must deduplicate them.
    """
    counter, node_id = decode_password(expand_seed(seed))
    counter_jitter = itertools.cycle(COUNTER_JITTER)
    node_jitter = itertools.cycle(NODE_ID_JITTER)
    for _ in range(count):
        counter = (counter + COUNTER_MAX // count + next(counter_jitter)) % COUNTER_MODULUS
        node_id = (node_id + NODE_ID_MAX // count + next(node_jitter)) % NODE_ID_MODULUS
        yield counter, node_id


class WorkProof:
    """One proof generator: a search coordinate plus its current difficulty.

    Usage:

    - ``WorkProof.init`` to create generators
    - ``advance`` to try the next counter
    - ``proof_bytes`` to save the proof once the difficulty is acceptable
    - ``WorkProof.verify`` to check a previously generated proof
    """

    def __init__(
        self,
        identifier: bytes,
        counter: int,
        node_id: int,
        params: HashParams | None = None,
        hasher: HashFunction | None = None,
    ) -> None:
        self._salt = encode_salt(identifier)
        encode_password(counter, node_id)
        self._params = params or HashParams()
        self._hasher = hasher or get_hasher()
        self._counter = counter
        self._node_id = node_id
        self._difficulty = difficulty_of(self._salt, self.proof_model(), self._params, self._hasher)

    @classmethod
    def init(
        cls,
        count: int,
        seed: bytes,
        identifier: bytes,
        params: HashParams | None = None,
        hasher: HashFunction | None = None,
    ) -> list[WorkProof]:
        """Create ``count`` generators for parallel use.

        Args:
            count: Number of generators to create.
            seed: 1 to 20 bytes used to pick the starting coordinates. It need
                not be cryptographically random.
            identifier: 32-byte identifier to generate proofs for.
            params: Hash parameters, the recommended set by default.
            hasher: Hash primitive, the shared Argon2id hasher by default.

        Raises:
            InvalidInputLength: If the seed or identifier has the wrong size.
        """
        expand_seed(seed)
        encode_salt(identifier)
        return [
            cls(identifier, counter, node_id, params, hasher)
            for counter, node_id in start_points(count, seed)
        ]

    @staticmethod
    def verify(
        proof: bytes,
        identifier: bytes,
        params: HashParams | None = None,
        hasher: HashFunction | None = None,
    ) -> float:
        """Return the log10 difficulty of a serialised proof."""
        return verify(proof, identifier, params, hasher)

    def advance(self) -> float:
        """Move to the next counter and return its difficulty."""
        self._counter = increment_counter(self._counter)
        self._difficulty = difficulty_of(self._salt, self.proof_model(), self._params, self._hasher)
        return self._difficulty

    def proof_bytes(self) -> bytes:
        """Return the current 20-byte proof."""
        return encode_password(self._counter, self._node_id)

    def proof_model(self) -> Proof:
        return Proof(counter=self._counter, node_id=self._node_id)

    @property
    def difficulty(self) -> float:
        """Log10 difficulty of the current proof."""
        return self._difficulty

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def node_id(self) -> int:
        return self._node_id

    def __repr__(self) -> str:
        return (
            f"WorkProof(counter={self._counter}, node_id={self._node_id}, "
            f"difficulty={self._difficulty:.3f})"
        )
