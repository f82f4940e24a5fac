from __future__ import annotations

import math
import string
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, TextIO, Union

from .errors import InvalidInputError, ShortInputError
from .logger import get_logger
from .trie import Trie

LOGGER = get_logger(__name__)

TextSource = Union[str, TextIO]

_ASCII_LETTERS = frozenset(string.ascii_letters)
_READ_CHUNK = 1 << 16


def _iter_chars(source: TextSource) -> Iterator[str]:
    if isinstance(source, str):
        yield from source
        return
    for chunk in iter(lambda: source.read(_READ_CHUNK), ""):
        yield from chunk


class NgramScanner:
    """
    Sliding window of `size` uppercase letters over a text source.

    Non-letters are skipped entirely: they neither count toward the window nor
    reset it, so "Hello, you" at size 4 gives HELL ELLO LLOY LOYO OYOU.
    Raises ShortInputError if the source ends before one full window exists.
    Single pass; the underlying stream is consumed as the scanner advances.
    """

    def __init__(self, source: TextSource, size: int):
        if size < 1:
            raise InvalidInputError(f"Only ngrams 1 or greater are allowed (got {size}).")
        self.size = size
        self._chars = _iter_chars(source)
        self._window: deque[str] = deque(maxlen=size)
        self._emitted = False
        self._done = False

    def __iter__(self) -> "NgramScanner":
        return self

    def __next__(self) -> str:
        if self._done:
            raise StopIteration
        for ch in self._chars:
            if ch not in _ASCII_LETTERS:
                continue
            self._window.append(ch.upper())
            if len(self._window) == self.size:
                self._emitted = True
                return "".join(self._window)

        self._done = True
        if not self._emitted:
            raise ShortInputError(
                f"Text was not long enough to make an ngram of size {self.size} "
                f"(found {len(self._window)} letters)."
            )
        raise StopIteration


def count_ngrams(source: TextSource, size: int) -> tuple[Trie, int]:
    """Count every n-gram of `source` into a trie (payload = count). Returns (trie, total)."""
    counts = Trie()
    total = 0
    for gram in NgramScanner(source, size):
        total += 1
        current, present = counts.lookup(gram)
        counts.insert(gram, current + 1 if present else 1)
    return counts, total


@dataclass(frozen=True)
class FrequencyModel:
    """n-gram -> log10 probability, all n-grams the same length."""

    logp: dict[str, float]
    size: int

    @classmethod
    def from_counts(cls, counts: Trie, total: int, size: int) -> "FrequencyModel":
        if total <= 0:
            raise InvalidInputError("Ngram counts sum to <= 0.")
        logp = {w.word: math.log10(w.value / total) for w in counts.enumerate_words()}
        return cls(logp=logp, size=size)

    @classmethod
    def from_corpus(cls, source: TextSource, size: int) -> "FrequencyModel":
        counts, total = count_ngrams(source, size)
        LOGGER.info("Counted %d ngrams of size %d (%d distinct)", total, size, len(counts))
        return cls.from_counts(counts, total, size)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "FrequencyModel":
        """
        Parse "NGRAM<TAB>log10prob" records. The n-gram length is taken from the
        first record; every later record must match it. Blank lines are ignored.
        """
        logp: dict[str, float] = {}
        size = 0
        for lineno, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue

            fields = line.split("\t")
            if len(fields) < 2:
                raise InvalidInputError(f"line {lineno}: expected 'ngram<TAB>log10probability', got {line!r}")

            gram = fields[0].strip().upper()
            if not gram.isalpha() or not gram.isascii():
                raise InvalidInputError(f"line {lineno}: ngram {fields[0]!r} is not alphabetic")

            if size == 0:
                size = len(gram)
            elif len(gram) != size:
                raise InvalidInputError(
                    f"line {lineno}: ngram {gram!r} has length {len(gram)}, expected {size}"
                )

            try:
                logp[gram] = float(fields[1])
            except ValueError:
                raise InvalidInputError(f"line {lineno}: invalid float in frequency file: {fields[1]!r}") from None

        if not logp:
            raise InvalidInputError("No ngram records found in frequency table.")
        return cls(logp=logp, size=size)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FrequencyModel":
        with open(path, encoding="utf-8") as f:
            model = cls.from_lines(f)
        LOGGER.info("Loaded %d ngrams of size %d from %s", len(model), model.size, path)
        return model

    def to_lines(self) -> Iterator[str]:
        for gram in sorted(self.logp):
            yield f"{gram}\t{self.logp[gram]:.16f}"

    def get(self, gram: str, default: float) -> float:
        return self.logp.get(gram, default)

    def __contains__(self, gram: object) -> bool:
        return gram in self.logp

    def __getitem__(self, gram: str) -> float:
        return self.logp[gram]

    def __len__(self) -> int:
        return len(self.logp)
