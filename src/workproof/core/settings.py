"""Configuration for proof generation and validation.

Settings are loaded from environment variables (or a ``.env`` file) with
defaults matching the recommended Argon2id parameter set. Generator and
validator must agree on every hash parameter, so changing them is effectively
a protocol version change.
"""

from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from workproof.schemas.pow import (
    DEFAULT_ITERATIONS,
    DEFAULT_LANES,
    DEFAULT_MEMORY_BYTES,
    DEFAULT_OUTPUT_BYTES,
    HashParams,
)


def _default_worker_count() -> int:
    """Leave two cores free for the rest of the host, but always run one worker."""
    return max(3, os.cpu_count() or 1) - 2


class Settings(BaseSettings):
    """Proof-of-work settings loaded from environment variables."""

    # Argon2id parameters (must match between generator and validator)
    memory_bytes: int = Field(default=DEFAULT_MEMORY_BYTES, alias="WORKPROOF_MEMORY_BYTES")
    iterations: int = Field(default=DEFAULT_ITERATIONS, alias="WORKPROOF_ITERATIONS")
    lanes: int = Field(default=DEFAULT_LANES, alias="WORKPROOF_LANES")
    output_bytes: int = Field(default=DEFAULT_OUTPUT_BYTES, alias="WORKPROOF_OUTPUT_BYTES")

    # Search defaults
    worker_count: int = Field(default_factory=_default_worker_count, alias="WORKPROOF_WORKER_COUNT")
    difficulty: float = Field(default=1.0, alias="WORKPROOF_DIFFICULTY")
    search_timeout_seconds: float | None = Field(
        default=None,
        alias="WORKPROOF_SEARCH_TIMEOUT_SECONDS",
    )

    log_level: str = Field(default="INFO", alias="WORKPROOF_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def hash_params(self) -> HashParams:
        """Return the configured hash parameter set.

        Returns:
            A ``HashParams`` built from the four Argon2id settings
        """
        return HashParams(
            memory_bytes=self.memory_bytes,
            iterations=self.iterations,
            lanes=self.lanes,
            output_bytes=self.output_bytes,
        )


settings = Settings()
