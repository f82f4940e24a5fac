from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from .utils import normalize_az


@dataclass(frozen=True)
class LetterFrequency:
    letter: str
    count: int
    percent: float

    def to_dict(self) -> dict[str, Any]:
        return {"letter": self.letter, "count": self.count, "percent": self.percent}

    def __str__(self) -> str:
        return f"{self.letter}: {self.count} ({self.percent:.2f}%)"


def letter_frequencies(text: str) -> list[LetterFrequency]:
    """
    Single-letter frequency table for the A-Z letters of `text`
    (case-folded), most frequent first, ties broken alphabetically.
    """
    az = normalize_az(text)
    total = len(az)
    if total == 0:
        return []

    counts = Counter(az)
    ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [LetterFrequency(letter=ch, count=c, percent=100.0 * c / total) for ch, c in ordered]
