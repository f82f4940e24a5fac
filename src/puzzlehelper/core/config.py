from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import InvalidInputError

DEFAULT_NGRAM_SIZE = 4


def _require_positive(name: str, value: int) -> None:
    if value < 1:
        raise InvalidInputError(f"{name} must be >= 1 (got {value}).")


def _require_range(lo_name: str, lo: int, hi_name: str, hi: Optional[int]) -> None:
    _require_positive(lo_name, lo)
    if hi is not None and hi < lo:
        raise InvalidInputError(f"{hi_name} ({hi}) must be >= {lo_name} ({lo}).")


@dataclass(frozen=True)
class WordSearchConfig:
    """Bounds for transposal / letter-bank searches. None means unbounded."""

    min_word_len: int = 1
    max_word_len: Optional[int] = None
    min_words: int = 1
    max_words: Optional[int] = None

    # Optional cut-offs for pathological dictionaries
    max_seconds: Optional[float] = None
    max_nodes: Optional[int] = None

    def __post_init__(self) -> None:
        _require_range("min_word_len", self.min_word_len, "max_word_len", self.max_word_len)
        _require_range("min_words", self.min_words, "max_words", self.max_words)

    def accepts(self, words: list[str]) -> bool:
        if len(words) < self.min_words:
            return False
        if self.max_words is not None and len(words) > self.max_words:
            return False
        for w in words:
            if len(w) < self.min_word_len:
                return False
            if self.max_word_len is not None and len(w) > self.max_word_len:
                return False
        return True

    def room_for_another_word(self, closed_words: int) -> bool:
        # closing a word only pays off if at least one more word still fits
        return self.max_words is None or closed_words < self.max_words


@dataclass(frozen=True)
class SubstitutionConfig:
    concurrency: int = 4
    max_seconds: Optional[float] = None
    max_nodes: Optional[int] = None

    def __post_init__(self) -> None:
        # 0 is accepted and clamped by the solver
        if self.concurrency < 0:
            raise InvalidInputError(f"concurrency must be >= 0 (got {self.concurrency}).")


@dataclass(frozen=True)
class HillclimbConfig:
    generations: int = 50
    mutations: int = 1
    regen_after: int = 1000
    candidate_count: int = 10
    local_lookaround: int = 1
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        _require_positive("generations", self.generations)
        _require_positive("mutations", self.mutations)
        _require_positive("candidate_count", self.candidate_count)
        _require_positive("local_lookaround", self.local_lookaround)
        if self.regen_after < 0:
            raise InvalidInputError(f"regen_after must be >= 0 (got {self.regen_after}).")
