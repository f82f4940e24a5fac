from __future__ import annotations

import re
from collections import Counter

_AZ_ONLY_RE = re.compile(r"[^A-Z]+")
_WORD_RE = re.compile(r"[A-Z]+")


def normalize_az(s: str) -> str:
    """Keep only A-Z, uppercase."""
    if not s:
        return ""
    return _AZ_ONLY_RE.sub("", s.upper())


def split_words(s: str) -> list[str]:
    """Uppercase A-Z runs of `s`, in order. Anything else separates words."""
    return _WORD_RE.findall(s.upper())


def letter_counts(s: str) -> dict[str, int]:
    """Multiset of the A-Z letters in `s` (case-folded, everything else dropped)."""
    return dict(Counter(normalize_az(s)))


def letter_set(s: str) -> frozenset[str]:
    return frozenset(normalize_az(s))
