"""Log10 difficulty metric for raw hash outputs.

The output bytes are read as a little-endian unsigned integer ``x`` and placed
on ``[0, 1]`` as ``p = x / (2**(8L) - 1)``. The difficulty is
``log10(1 / (1 - p))``: the number of orders of magnitude of attempts expected
before an output this large turns up. A difficulty of 2.0 therefore costs
about ten times the hashing of a difficulty of 1.0.
"""

from __future__ import annotations

import math

from workproof.core.encoding import BYTE_ORDER
from workproof.core.errors import InvalidInputLength


def score(output: bytes) -> float:
    """Return the difficulty of a raw hash output.

    Args:
        output: Raw hash output of any non-zero length.

    Returns:
        ``0.0`` for an all-zero output, ``math.inf`` when the output is (or
        rounds to) the maximum value, otherwise a positive float.

    Raises:
        InvalidInputLength: If ``output`` is empty.
    """
    if not output:
        raise InvalidInputLength("hash output", "at least 1", 0)
    value = int.from_bytes(output, BYTE_ORDER)
    maximum = (1 << (8 * len(output))) - 1
    try:
        pct = float(value) / float(maximum)
    except OverflowError:
        # outputs wider than a double can hold
        pct = value / maximum
    if pct >= 1.0:
        return math.inf
    return math.log10(1.0 / (1.0 - pct))


def meets(difficulty: float, target: float) -> bool:
    """Return True if ``difficulty`` reaches ``target``."""
    return difficulty >= target


def expected_attempts(target: float) -> float:
    """Return the expected number of hashes needed to reach ``target``."""
    if target <= 0.0:
        return 1.0
    try:
        return math.pow(10.0, target)
    except OverflowError:
        return math.inf
