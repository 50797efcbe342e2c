"""Schemas for hash parameters and proofs."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from workproof.core.encoding import (
    COUNTER_MAX,
    NODE_ID_MAX,
    decode_password,
    encode_password,
)

DEFAULT_MEMORY_BYTES: Final[int] = 16_777_216
DEFAULT_ITERATIONS: Final[int] = 1
DEFAULT_LANES: Final[int] = 1
DEFAULT_OUTPUT_BYTES: Final[int] = 16


class HashParams(BaseModel):
    """Argon2id cost parameters.

    Proofs made under one parameter set are not comparable with proofs made
    under another, so the set acts as a protocol version. Values are kept
    exactly as given; the hash adapter rejects unsupported ones.
    """

    model_config = ConfigDict(frozen=True)

    memory_bytes: int = DEFAULT_MEMORY_BYTES
    iterations: int = DEFAULT_ITERATIONS
    lanes: int = DEFAULT_LANES
    output_bytes: int = DEFAULT_OUTPUT_BYTES

    @property
    def memory_kib(self) -> int:
        """Memory cost in KiB, the unit Argon2 works in."""
        return self.memory_bytes // 1024


class Proof(BaseModel):
    """A winning ``(counter, node_id)`` search coordinate."""

    model_config = ConfigDict(frozen=True)

    counter: int = Field(ge=0, le=COUNTER_MAX)
    node_id: int = Field(ge=0, le=NODE_ID_MAX)

    def to_bytes(self) -> bytes:
        """Serialise to the 20-byte search input."""
        return encode_password(self.counter, self.node_id)

    @classmethod
    def from_bytes(cls, data: bytes) -> Proof:
        """Parse a 20-byte serialised proof.

        Raises:
            InvalidInputLength: If ``data`` is not exactly 20 bytes.
        """
        counter, node_id = decode_password(data)
        return cls(counter=counter, node_id=node_id)

    def hex(self) -> str:
        """Return the serialised proof as lowercase hex."""
        return self.to_bytes().hex()

    @classmethod
    def from_hex(cls, value: str) -> Proof:
        """Parse a hex-encoded serialised proof."""
        return cls.from_bytes(bytes.fromhex(value))
