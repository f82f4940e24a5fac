from __future__ import annotations


class PuzzleError(Exception):
    """Base class for every failure raised by the solving core."""


class InvalidInputError(PuzzleError, ValueError):
    """Input that a core structure refuses to accept (e.g. lowercase trie keys)."""


class ShortInputError(PuzzleError, ValueError):
    """Text ran out before a single full n-gram window could be formed."""
