from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True, order=True)
class WordListResult:
    """One transposal / letter-bank solution: the words, in the order they were found."""

    words: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"words": list(self.words)}

    def __str__(self) -> str:
        return " ".join(self.words)


@dataclass(frozen=True)
class SubstitutionSolution:
    # cipher letter -> plain letter (partial: only letters seen in the ciphertext)
    mapping: dict[str, str]
    plaintext: str

    # None when no frequency model was supplied (or the text is shorter than one n-gram)
    fitness: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mapping": dict(sorted(self.mapping.items())),
            "plaintext": self.plaintext,
            "fitness": self.fitness,
        }

    def __str__(self) -> str:
        return self.plaintext


@dataclass(frozen=True, order=True)
class HillclimbResult:
    # sort_index comes first so dataclass ordering uses it automatically
    sort_index: float = field(init=False, repr=False)

    fitness: float
    key: str
    plaintext: str

    def __post_init__(self) -> None:
        # ascending sort on the negated fitness puts the best key first
        object.__setattr__(self, "sort_index", -self.fitness)

    def to_dict(self) -> dict[str, Any]:
        return {"fitness": self.fitness, "key": self.key, "plaintext": self.plaintext}

    def __str__(self) -> str:
        alphabet = " ".join(chr(ord("A") + i) for i in range(26))
        return f"fitness: {self.fitness:.8f}\n{alphabet}\n{' '.join(self.key)}\n{self.plaintext}"


@dataclass(frozen=True)
class CaesarShift:
    shift: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"shift": self.shift, "text": self.text}

    def __str__(self) -> str:
        return f"{self.shift}. {self.text}"
