from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping

from puzzlehelper.core.errors import InvalidInputError
from puzzlehelper.core.utils import letter_counts, letter_set


class LetterConstraint(ABC):
    """
    The letter budget threaded through a trie walk.

    Implementations are immutable: consume() returns a new constraint and
    leaves the receiver untouched, so sibling branches (and threads) can
    share a parent freely.
    """

    # Whether a satisfied match at a word boundary ends the branch
    stop_on_match: bool = True

    @abstractmethod
    def letters(self) -> list[str]:
        """Starting domain, A..Z order."""

    @abstractmethod
    def allows(self, letter: str) -> bool:
        ...

    @abstractmethod
    def consume(self, letter: str) -> "LetterConstraint":
        ...

    @abstractmethod
    def is_satisfied(self) -> bool:
        ...


@dataclass(frozen=True)
class MultisetConstraint(LetterConstraint):
    """Every letter must be used exactly as many times as it was given (transposals)."""

    counts: Mapping[str, int] = field(default_factory=dict)

    stop_on_match = True

    def __post_init__(self) -> None:
        cleaned = {}
        for letter, n in self.counts.items():
            if n < 0:
                raise InvalidInputError(f"Negative count {n} for letter {letter!r}.")
            if n:
                cleaned[letter] = n
        object.__setattr__(self, "counts", cleaned)

    @classmethod
    def from_text(cls, text: str) -> "MultisetConstraint":
        return cls(letter_counts(text))

    def letters(self) -> list[str]:
        return sorted(self.counts)

    def allows(self, letter: str) -> bool:
        return letter in self.counts

    def consume(self, letter: str) -> "MultisetConstraint":
        remaining = self.counts.get(letter)
        if remaining is None:
            raise InvalidInputError(f"Letter {letter!r} is not available in {self!r}.")
        new_counts = dict(self.counts)
        if remaining > 1:
            new_counts[letter] = remaining - 1
        else:
            # never keep a zero entry
            del new_counts[letter]
        return MultisetConstraint(new_counts)

    def is_satisfied(self) -> bool:
        return not self.counts


@dataclass(frozen=True)
class SetConstraint(LetterConstraint):
    """
    Letter-bank budget: only letters from `bank` may be used, any number of
    times, and every one of them must appear at least once.
    """

    bank: frozenset[str] = frozenset()
    used: frozenset[str] = frozenset()

    # longer words over the same letter set are still valid banks
    stop_on_match = False

    @classmethod
    def from_text(cls, text: str) -> "SetConstraint":
        return cls(letter_set(text))

    def letters(self) -> list[str]:
        return sorted(self.bank)

    def allows(self, letter: str) -> bool:
        return letter in self.bank

    def consume(self, letter: str) -> "SetConstraint":
        if letter not in self.bank:
            raise InvalidInputError(f"Letter {letter!r} is not in the bank {''.join(self.letters())!r}.")
        if letter in self.used:
            return self
        return SetConstraint(self.bank, self.used | {letter})

    def is_satisfied(self) -> bool:
        return self.used == self.bank
