"""Search input encoding.

The hashed "password" is 20 bytes: the attempt counter as a little-endian
u128 followed by the node id as a little-endian u32. The 32-byte identifier is
used as the Argon2 salt. A serialised proof is exactly the password bytes.
"""

from __future__ import annotations

from typing import Final

from workproof.core.errors import InvalidInputLength

COUNTER_BYTES: Final[int] = 16
NODE_ID_BYTES: Final[int] = 4
PASSWORD_BYTES: Final[int] = COUNTER_BYTES + NODE_ID_BYTES
SALT_BYTES: Final[int] = 32

COUNTER_MODULUS: Final[int] = 1 << (8 * COUNTER_BYTES)
COUNTER_MAX: Final[int] = COUNTER_MODULUS - 1
NODE_ID_MODULUS: Final[int] = 1 << (8 * NODE_ID_BYTES)
NODE_ID_MAX: Final[int] = NODE_ID_MODULUS - 1

BYTE_ORDER: Final = "little"


def encode_password(counter: int, node_id: int) -> bytes:
    """Build the 20-byte search input for an attempt.

    Args:
        counter: Attempt counter in ``[0, 2**128)``.
        node_id: Worker node id in ``[0, 2**32)``.

    Returns:
        ``counter`` (16 bytes LE) followed by ``node_id`` (4 bytes LE).

    Raises:
        InvalidInputLength: If either value does not fit its fixed width.
    """
    if not 0 <= counter <= COUNTER_MAX:
        raise InvalidInputLength("counter", COUNTER_BYTES, (counter.bit_length() + 7) // 8)
    if not 0 <= node_id <= NODE_ID_MAX:
        raise InvalidInputLength("node id", NODE_ID_BYTES, (node_id.bit_length() + 7) // 8)
    return counter.to_bytes(COUNTER_BYTES, BYTE_ORDER) + node_id.to_bytes(NODE_ID_BYTES, BYTE_ORDER)


def decode_password(data: bytes) -> tuple[int, int]:
    """Split a 20-byte search input back into ``(counter, node_id)``."""
    if len(data) != PASSWORD_BYTES:
        raise InvalidInputLength("search input", PASSWORD_BYTES, len(data))
    counter = int.from_bytes(data[:COUNTER_BYTES], BYTE_ORDER)
    node_id = int.from_bytes(data[COUNTER_BYTES:], BYTE_ORDER)
    return counter, node_id


def encode_salt(identifier: bytes) -> bytes:
    """Return the salt for an identifier (the identifier itself)."""
    if len(identifier) != SALT_BYTES:
        raise InvalidInputLength("identifier", SALT_BYTES, len(identifier))
    return bytes(identifier)


def increment_counter(counter: int) -> int:
    """Advance an attempt counter, wrapping ``2**128 - 1`` to ``0``."""
    return (counter + 1) % COUNTER_MODULUS
