"""Exception types raised by the proof-of-work layer.

Search outcomes such as an exhausted counter space or a cancelled search are
not errors; they are reported through ``SearchStatus``.
"""

from __future__ import annotations


class WorkProofError(RuntimeError):
    """Base exception for proof-of-work failures."""


class InvalidInputLength(WorkProofError, ValueError):
    """Raised when an identifier, proof or search input has the wrong size.

    This is an integration error; the caller must fix its input before
    retrying.
    """

    def __init__(self, what: str, expected: int | str, actual: int) -> None:
        super().__init__(f"{what} must be {expected} bytes, got {actual}")
        self.what = what
        self.expected = expected
        self.actual = actual


class UnsupportedParameters(WorkProofError):
    """Raised when the hash primitive rejects the configured hash parameters.

    Parameters are never adjusted to make them acceptable.
    """
