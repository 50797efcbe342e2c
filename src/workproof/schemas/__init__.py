"""Pydantic data models shared by the proof-of-work services."""

from .pow import HashParams, Proof

__all__ = ["HashParams", "Proof"]
