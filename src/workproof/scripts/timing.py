# src/workproof/scripts/timing.py
"""
Multi-threaded hashing benchmark.

Runs one ``WorkProof`` generator per worker thread and, every interval,
prints the number of hashes completed, the average seconds per hash and how
many attempts reached difficulty 1 through 5 ("nines").

Usage:
    python -m workproof.scripts.timing --interval 5 --rounds 12
"""

from __future__ import annotations

import argparse
import logging
import threading
import time
from collections.abc import Iterable

from workproof.core.settings import settings
from workproof.services.generator import WorkProof

NINES = 5
BATCH_SIZE = 10
DEFAULT_SEED = b"\xdb" * 20
DEFAULT_IDENTIFIER = b"\xdb" * 32

logger = logging.getLogger(__name__)


class TimingState:
    """Shared timing counters, guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._start = time.monotonic()
        self._durations: list[float] = []
        self._nines = [0] * NINES

    def record(self, samples: Iterable[tuple[float, float]]) -> None:
        """Record ``(duration, difficulty)`` samples."""
        with self._lock:
            for duration, difficulty in samples:
                self._durations.append(duration)
                for i in range(NINES):
                    if difficulty >= i + 1:
                        self._nines[i] += 1

    def report(self, interval: float) -> str:
        """Return a summary line and reset the per-interval durations."""
        with self._lock:
            count = len(self._durations)
            avg = sum(self._durations) / count if count else 0.0
            line = (
                f"{time.monotonic() - self._start:0.1f}s: {count} in {interval:g} seconds: "
                f"avg {avg:0.4f}s, nines: {self._nines}"
            )
            self._durations.clear()
        return line


def run_worker(generator: WorkProof, state: TimingState, stop: threading.Event) -> None:
    """Advance ``generator`` until ``stop`` is set, reporting in batches."""
    samples: list[tuple[float, float]] = []
    while not stop.is_set():
        for _ in range(BATCH_SIZE):
            started = time.monotonic()
            difficulty = generator.advance()
            samples.append((time.monotonic() - started, difficulty))
        state.record(samples)
        samples.clear()


def main(argv: list[str] | None = None) -> None:
    """Run the benchmark."""
    parser = argparse.ArgumentParser(description="Time Argon2id proof-of-work hashing.")
    parser.add_argument("--workers", type=int, default=settings.worker_count)
    parser.add_argument("--interval", type=float, default=5.0, help="seconds between reports")
    parser.add_argument("--rounds", type=int, default=0, help="reports before exiting (0 = forever)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)
    print("(multithread) timing every %g seconds:" % args.interval)

    generators = WorkProof.init(
        args.workers,
        DEFAULT_SEED,
        DEFAULT_IDENTIFIER,
        settings.hash_params,
    )
    state = TimingState()
    stop = threading.Event()
    threads = [
        threading.Thread(target=run_worker, args=(g, state, stop), daemon=True)
        for g in generators
    ]
    for thread in threads:
        thread.start()
    logger.info("Started %d workers with %r", len(threads), settings.hash_params)

    rounds = 0
    try:
        while args.rounds == 0 or rounds < args.rounds:
            time.sleep(args.interval)
            print(state.report(args.interval))
            rounds += 1
    except KeyboardInterrupt:
        pass
    finally:
        stop.set()


if __name__ == "__main__":
    main()
