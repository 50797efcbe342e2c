"""Proof search, validation and generator services."""

from .generator import WorkProof
from .orchestrator import run_search
from .pow import PowService, difficulty_of, generate_proof, validate_proof
from .search import SearchResult, SearchStatus

__all__ = [
    "PowService",
    "SearchResult",
    "SearchStatus",
    "WorkProof",
    "difficulty_of",
    "generate_proof",
    "run_search",
    "validate_proof",
]
